"""Service registry and dependency wiring."""

from .registry import ServiceRegistry, get_service_registry

__all__ = ["ServiceRegistry", "get_service_registry"]
