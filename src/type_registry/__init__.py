"""A type-indexed service registry."""

from .exceptions import ConstructionError, InvalidArgumentError, RegistryError, ServiceNotFoundError  # noqa: F401
from .hierarchy import TypeHierarchy, get_type_hierarchy  # noqa: F401
from .logging import setup_logging  # noqa: F401
from .registry import TypeRegistry, get_type_registry  # noqa: F401
from .settings import Settings, get_settings  # noqa: F401

__all__ = [
    "ConstructionError",
    "InvalidArgumentError",
    "RegistryError",
    "ServiceNotFoundError",
    "Settings",
    "TypeHierarchy",
    "TypeRegistry",
    "get_settings",
    "get_type_hierarchy",
    "get_type_registry",
    "setup_logging",
]
