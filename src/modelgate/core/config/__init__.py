from .settings import GatewaySettings, load_catalog

__all__ = ["GatewaySettings", "load_catalog"]
