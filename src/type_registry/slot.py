"""Value holder shared by every type key of a single registration."""

import threading
from collections.abc import Callable
from typing import Any

_EMPTY: Any = object()


class Slot:
    """Holds the service instance of one registration, or nothing yet.

    A slot starts either empty (lazy registration) or filled (eager
    registration, or a registered instance). Filling is one-way: once a value
    is stored it is never replaced or cleared.

    The slot lock serializes construction, so concurrent callers asking for
    the same empty slot build at most one instance.
    """

    __slots__ = ("service_type", "_value", "_lock")

    def __init__(self, service_type: type, value: Any = _EMPTY):
        """Initialize a slot for a concrete service type.

        Args:
            service_type: The concrete class this slot was registered for
            value: The service instance; omit to create an empty slot
        """
        self.service_type = service_type
        self._value = value
        self._lock = threading.Lock()

    @property
    def is_filled(self) -> bool:
        """Whether the slot holds a value."""
        return self._value is not _EMPTY

    @property
    def value(self) -> Any:
        """Get the held value.

        Raises:
            LookupError: If the slot is still empty
        """
        if self._value is _EMPTY:
            raise LookupError(f"Slot for {self.service_type.__qualname__} is empty")
        return self._value

    def fill(self, factory: Callable[[], Any]) -> Any:
        """Fill the slot once and return its value.

        The first caller runs ``factory`` while holding the slot lock; callers
        arriving meanwhile wait and observe the stored value. If ``factory``
        raises, the slot stays empty and the exception propagates.

        Args:
            factory: Callable producing the value

        Returns:
            The value held by the slot after filling
        """
        if self._value is not _EMPTY:
            return self._value

        with self._lock:
            if self._value is _EMPTY:
                self._value = factory()
            return self._value

    def __repr__(self) -> str:
        state = "filled" if self.is_filled else "empty"
        return f"Slot({self.service_type.__qualname__}, {state})"
