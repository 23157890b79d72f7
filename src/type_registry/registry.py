"""Type-indexed service registry.

Services are registered under their concrete class and, in the same call,
under every ancestor and interface of that class. Lookups by any of those
types return the registered service; lazily registered services are built on
first lookup with their no-argument constructor.

```python
registry = TypeRegistry()
registry.register(SmtpMailer)               # lazy, nothing constructed yet
mailer = registry.get(Mailer)               # Mailer is an interface of SmtpMailer
registry.remove(Mailer)                     # drops SmtpMailer and all its aliases
```
"""

import threading
import weakref
from collections.abc import Iterable
from functools import lru_cache, partial
from typing import Any, TypeVar

from loguru import logger

from .exceptions import ConstructionError, InvalidArgumentError, ServiceNotFoundError
from .hierarchy import get_type_hierarchy, is_subtype
from .settings import get_settings
from .slot import Slot

T = TypeVar("T")


class TypeRegistry:
    """Thread-safe registry mapping types to shared service slots.

    The table lock only guards dictionary access. Service constructors run
    outside of it. Per-key fills are serialized by a lock for the requested
    key, so a constructor may look up other keys of its own registration.
    Shared fills are serialized by the slot lock; there a constructor must
    not look up its own registration through any key.
    """

    def __init__(self, default_lazy: bool | None = None, share_lazy_instances: bool | None = None):
        """Initialize an empty type registry.

        Args:
            default_lazy: Whether ``register`` defers construction when ``lazy``
                is not given. Defaults to ``Settings.default_lazy``.
            share_lazy_instances: If True, a lazily constructed instance is
                visible under every key of its registration. If False, each key
                constructs its own instance on first lookup. Defaults to
                ``Settings.share_lazy_instances``.
        """
        settings = get_settings()
        self._default_lazy = settings.default_lazy if default_lazy is None else default_lazy
        self._share_lazy_instances = settings.share_lazy_instances if share_lazy_instances is None else share_lazy_instances
        self._services: dict[type, Slot] = {}
        self._lock = threading.RLock()
        # Per-key construction locks for per-key fills
        self._key_locks: weakref.WeakKeyDictionary[type, threading.Lock] = weakref.WeakKeyDictionary()
        logger.debug(
            f"TypeRegistry initialized (default_lazy={self._default_lazy}, "
            f"share_lazy_instances={self._share_lazy_instances})"
        )

    def register(self, service_type: type, lazy: bool | None = None) -> None:
        """Register a class under itself, its ancestors and its interfaces.

        Existing entries for any of those keys are overwritten.

        Args:
            service_type: The class to register. It must be constructible
                without arguments.
            lazy: Defer construction until first lookup. Defaults to the
                registry's ``default_lazy``.

        Raises:
            InvalidArgumentError: If service_type is None or not a class
            ConstructionError: If eager construction fails. No key is installed.
        """
        _require_type(service_type, "service_type")

        if lazy is None:
            lazy = self._default_lazy

        if lazy:
            slot = Slot(service_type)
        else:
            slot = Slot(service_type, self._construct(service_type))

        self._install(slot)

    def register_instance(self, instance: Any) -> None:
        """Register an existing instance under its runtime class and that class's hierarchy.

        Args:
            instance: The service instance to register

        Raises:
            InvalidArgumentError: If instance is None or is itself a class
        """
        if instance is None:
            raise InvalidArgumentError("instance cannot be None")
        if isinstance(instance, type):
            raise InvalidArgumentError(f"instance must not be a class, got: {instance.__qualname__}")

        self._install(Slot(type(instance), instance))

    def _install(self, slot: Slot) -> None:
        hierarchy = get_type_hierarchy(slot.service_type)
        keys = [slot.service_type, *hierarchy.aliases]

        with self._lock:
            for key in keys:
                self._services[key] = slot

        logger.debug(f"Registered {slot!r} under {len(keys)} keys: {', '.join(key.__qualname__ for key in keys)}")

    def remove(self, service_type: type[T]) -> list[T]:
        """Remove a type and every registered subtype, with all their aliases.

        Every entry whose key is ``service_type`` or a subclass of it is
        selected. For each selected entry, the keys of that entry's own
        ancestors and interfaces are dropped as well, even if another
        registration installed them.

        Args:
            service_type: The type to remove

        Returns:
            The instances held by the selected entries, in removal order. Each
            instance appears once (compared by identity), so the list behaves
            as a set; unhashable services are supported.

        Raises:
            InvalidArgumentError: If service_type is None or not a class
        """
        _require_type(service_type, "service_type")

        removed_keys: list[type] = []
        with self._lock:
            selected = [(key, slot) for key, slot in self._services.items() if is_subtype(key, service_type)]

            for key, _slot in selected:
                for alias in get_type_hierarchy(key).aliases:
                    if self._services.pop(alias, None) is not None:
                        removed_keys.append(alias)
                if self._services.pop(key, None) is not None:
                    removed_keys.append(key)

        values = _distinct_values(slot for _key, slot in selected)
        logger.debug(
            f"Removed {service_type.__qualname__}: {len(removed_keys)} keys, {len(values)} instances "
            f"({', '.join(key.__qualname__ for key in removed_keys)})"
        )
        return values

    def clear(self) -> list[Any]:
        """Remove every entry from the registry.

        Returns:
            The distinct instances that were held by the registry
        """
        with self._lock:
            slots = list(self._services.values())
            self._services.clear()

        values = _distinct_values(slots)
        logger.debug(f"Cleared registry ({len(values)} instances)")
        return values

    def get(self, service_type: type[T]) -> T:
        """Get the service registered under a type.

        Args:
            service_type: The type of the service to retrieve

        Returns:
            The registered instance, constructed first if it was registered lazily

        Raises:
            ServiceNotFoundError: If nothing is registered under service_type
            ConstructionError: If lazy construction fails
            InvalidArgumentError: If service_type is None or not a class
        """
        service = self.get_optional(service_type)
        if service is None:
            raise ServiceNotFoundError(service_type)
        return service

    def get_optional(self, service_type: type[T]) -> T | None:
        """Get the service registered under a type, or None if there is none.

        An empty entry is filled by constructing a default instance. In the
        default per-key mode the requested type itself is constructed and only
        the requested key is updated; the other keys of the same registration
        stay empty until they are looked up. With ``share_lazy_instances`` the
        registered class is constructed once and every key observes it.

        Raises:
            ConstructionError: If lazy construction fails. The entry stays empty.
            InvalidArgumentError: If service_type is None or not a class
        """
        _require_type(service_type, "service_type")

        while True:
            with self._lock:
                slot = self._services.get(service_type)

            if slot is None:
                logger.trace(f"No service registered for {service_type.__qualname__}")
                return None

            if slot.is_filled:
                return slot.value

            if self._share_lazy_instances:
                return slot.fill(partial(self._construct, slot.service_type))

            filled = self._fill_key(service_type, slot)
            if filled is not None:
                return filled.value
            # The key was filled, re-registered or removed meanwhile; look again

    def _fill_key(self, service_type: type, slot: Slot) -> Slot | None:
        """Replace the empty slot under one key with a freshly filled slot.

        Returns:
            The new filled slot, or None if the key no longer maps to ``slot``
        """
        with self._key_lock(service_type):
            with self._lock:
                if self._services.get(service_type) is not slot:
                    return None

            filled = Slot(service_type, self._construct(service_type))

            with self._lock:
                if self._services.get(service_type) is not slot:
                    logger.trace(f"Discarding instance of {service_type.__qualname__}, entry changed during construction")
                    return None
                self._services[service_type] = filled

        return filled

    def _key_lock(self, service_type: type) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(service_type)
            if lock is None:
                lock = self._key_locks[service_type] = threading.Lock()
            return lock

    def _construct(self, service_type: type[T]) -> T:
        logger.trace(f"Constructing default instance of {service_type.__qualname__}")
        try:
            return service_type()
        except Exception as e:
            logger.warning(f"Failed to construct {service_type.__qualname__}: {e}")
            raise ConstructionError(service_type, e) from e

    def contains(self, service_type: type | None) -> bool:
        """Check whether a type is registered, constructed or not."""
        if not isinstance(service_type, type):
            return False
        with self._lock:
            return service_type in self._services

    def is_initialized(self, service_type: type | None) -> bool:
        """Check whether a type is registered and its instance has been constructed."""
        if not isinstance(service_type, type):
            return False
        with self._lock:
            slot = self._services.get(service_type)
        return slot is not None and slot.is_filled

    def registered_types(self) -> frozenset[type]:
        """Get a snapshot of every type key currently in the registry."""
        with self._lock:
            return frozenset(self._services)

    def __contains__(self, service_type: object) -> bool:
        return self.contains(service_type)  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)

    def __enter__(self) -> "TypeRegistry":
        return self

    def __exit__(self, *exc_info) -> None:
        self.clear()


def _require_type(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} cannot be None")
    if not isinstance(value, type):
        raise InvalidArgumentError(f"{name} must be a class, got: {type(value).__name__}")


def _distinct_values(slots: Iterable[Slot]) -> list[Any]:
    """Collect the values of filled slots, dropping repeats of the same object."""
    values: list[Any] = []
    seen: set[int] = set()
    for slot in slots:
        if not slot.is_filled or id(slot.value) in seen:
            continue
        seen.add(id(slot.value))
        values.append(slot.value)
    return values


@lru_cache
def get_type_registry() -> TypeRegistry:
    """Get the process-wide type registry instance.

    Returns:
        The global type registry
    """
    return TypeRegistry()


__all__ = ["TypeRegistry", "get_type_registry"]
