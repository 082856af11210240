"""Plain-text rendering of price cards and the history chart."""

from __future__ import annotations

from coinboard.dashboard import DashboardState
from coinboard.models.series import PriceSeries
from coinboard.models.snapshot import PriceSnapshot

SPARK_CHARS = "▁▂▃▄▅▆▇█"

_COMPACT_UNITS = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def format_usd(value: float, compact: bool = False) -> str:
    """Format a USD amount with at most two decimals.

    ``compact`` abbreviates large amounts: 65000 -> "$65K", 1234567 -> "$1.23M".
    """
    sign = "-" if value < 0 else ""
    amount = abs(value)
    if compact:
        for threshold, suffix in _COMPACT_UNITS:
            if amount >= threshold:
                scaled = f"{amount / threshold:.2f}".rstrip("0").rstrip(".")
                return f"{sign}${scaled}{suffix}"
    return f"{sign}${amount:,.2f}"


def format_change(pct: float) -> str:
    """Signed percent with two decimals: "+1.23%", "-0.50%"."""
    return f"{'+' if pct >= 0 else ''}{pct:.2f}%"


def render_card(snapshot: PriceSnapshot, compact: bool = False) -> str:
    arrow = "▲" if snapshot.is_up else "▼"
    return (
        f"{snapshot.name} ({snapshot.symbol})  "
        f"{format_usd(snapshot.price_usd, compact)}  "
        f"{arrow} {format_change(snapshot.change_24h_pct)}"
    )


def sparkline(prices: list[float]) -> str:
    if not prices:
        return ""
    low, high = min(prices), max(prices)
    span = high - low
    if span == 0:
        return SPARK_CHARS[len(SPARK_CHARS) // 2] * len(prices)
    top = len(SPARK_CHARS) - 1
    return "".join(SPARK_CHARS[round((p - low) / span * top)] for p in prices)


def render_chart(series: PriceSeries) -> str:
    if series.is_empty:
        return f"{series.asset.value}: no data"
    labels = series.labels
    prices = series.prices
    return "\n".join([
        sparkline(prices),
        f"{labels[0]} .. {labels[-1]}  "
        f"low {format_usd(min(prices))}  high {format_usd(max(prices))}  "
        f"last {format_usd(prices[-1])}  ({len(series)} points, {series.source})",
    ])


def render_dashboard(state: DashboardState, history_hours: float = 6) -> str:
    lines: list[str] = []
    if state.error:
        lines.append(f"! {state.error}")
    if state.tickers is None:
        lines.append("Loading prices...")
    else:
        lines.extend(render_card(t) for t in state.tickers)
    if state.series is not None:
        lines.append("")
        lines.append(f"{state.series.asset.value.title()} price (last {history_hours:g} hours)")
        lines.append(render_chart(state.series))
    if state.last_updated is not None:
        lines.append(f"Last update: {state.last_updated.astimezone().strftime('%H:%M:%S')}")
    return "\n".join(lines)
