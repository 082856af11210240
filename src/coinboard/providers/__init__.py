"""Price provider registry."""

from __future__ import annotations

from coinboard.config import ProviderType
from coinboard.providers.base import BasePriceProvider

# Lazy registry: provider modules are imported on first use.
PROVIDER_CLASSES: dict[ProviderType, str] = {
    ProviderType.COINGECKO: "coinboard.providers.coingecko.CoinGeckoProvider",
    ProviderType.COINCAP: "coinboard.providers.coincap.CoinCapProvider",
    ProviderType.SYNTHETIC: "coinboard.providers.synthetic.SyntheticProvider",
}


def create_provider(
    provider_type: ProviderType,
    **kwargs,
) -> BasePriceProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BasePriceProvider", "PROVIDER_CLASSES", "create_provider"]
