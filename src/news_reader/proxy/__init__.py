"""Read-through proxy that hides the TheNewsApi token from clients."""

from news_reader.proxy.app import create_app
from news_reader.proxy.settings import ProxySettings

__all__ = ["ProxySettings", "create_app"]
