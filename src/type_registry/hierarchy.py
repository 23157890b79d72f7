"""Class hierarchy queries used to fan registrations out across type keys.

A registration for a concrete class is also visible under every class it
inherits from. This module splits those classes into two groups:

- **ancestors**: regular base classes, e.g. ``SampleSubclass`` for
  ``class SampleClass(SampleSubclass, SampleInterface)``
- **interfaces**: ``typing.Protocol`` classes and pure abstract base classes,
  followed transitively through interface inheritance

Infrastructure roots (``object``, ``abc.ABC``, ``typing.Generic`` and
``typing.Protocol``) are never part of a hierarchy. Every registration would
share them, so removing one would cascade into unrelated services.

The hierarchy is computed from the MRO once per class and cached for the
life of the process. The cache holds strong references, so a class inspected
once is never garbage collected, even after its registrations are removed.
A weak cache would not help: every cached ``TypeHierarchy`` refers to its own
class.
"""

from abc import ABC, ABCMeta
from functools import lru_cache
from typing import Generic, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict

ROOT_TYPES: frozenset[type] = frozenset({object, ABC, Generic, Protocol})  # type: ignore[arg-type]


class TypeHierarchy(BaseModel):
    """Ancestors and interfaces of a single class."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_type: type
    ancestors: frozenset[type] = frozenset()
    interfaces: frozenset[type] = frozenset()

    @property
    def aliases(self) -> frozenset[type]:
        """All keys a registration of ``service_type`` is installed under, besides itself."""
        return self.ancestors | self.interfaces


# Bookkeeping that ABCMeta and typing add to a class body
_MARKER_ATTRIBUTES = frozenset({"_abc_impl", "_is_protocol", "_is_runtime_protocol"})


@lru_cache(maxsize=None)
def is_interface(cls: type) -> bool:
    """Check whether a class acts as an interface rather than a base implementation.

    Protocol classes always count, and so do abstract base classes with
    abstract methods left to implement. An abstract base class without
    abstract methods counts only as a pure marker: it defines nothing of its
    own and builds on interfaces alone (``class Closeable(ABC): ...``). A class
    that implements an interface is an ancestor of its subclasses.
    """
    if cls in ROOT_TYPES:
        return False

    # Set by typing only on classes that list Protocol as a direct base
    if cls.__dict__.get("_is_protocol", False):
        return True

    if not isinstance(cls, ABCMeta):
        return False

    if getattr(cls, "__abstractmethods__", None):
        return True

    if any(not _is_dunder(name) and name not in _MARKER_ATTRIBUTES for name in cls.__dict__):
        return False

    return all(base in ROOT_TYPES or is_interface(base) for base in cls.__bases__)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


@lru_cache(maxsize=None)
def get_type_hierarchy(service_type: type) -> TypeHierarchy:
    """Get the cached hierarchy of a class.

    Args:
        service_type: The class to inspect

    Returns:
        TypeHierarchy with the ancestors and interfaces of ``service_type``,
        excluding the class itself and the infrastructure roots
    """
    ancestors: set[type] = set()
    interfaces: set[type] = set()

    for cls in service_type.__mro__[1:]:
        if cls in ROOT_TYPES:
            continue
        if is_interface(cls):
            interfaces.add(cls)
        else:
            ancestors.add(cls)

    logger.trace(
        f"Computed hierarchy for {service_type.__qualname__}: "
        f"ancestors={[c.__qualname__ for c in ancestors]}, interfaces={[c.__qualname__ for c in interfaces]}"
    )
    return TypeHierarchy(service_type=service_type, ancestors=frozenset(ancestors), interfaces=frozenset(interfaces))


def is_subtype(candidate: type, service_type: type) -> bool:
    """Check whether ``candidate`` is ``service_type`` or nominally inherits from it.

    Only the MRO is consulted. Structural protocol checks and virtual
    subclasses registered through ``ABCMeta.register`` are not followed.
    """
    return candidate is service_type or service_type in candidate.__mro__


__all__ = ["ROOT_TYPES", "TypeHierarchy", "get_type_hierarchy", "is_interface", "is_subtype"]
