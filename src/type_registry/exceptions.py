"""Exceptions raised by the type registry.

All errors derive from ``RegistryError`` so callers can catch any registry
failure in one place:

```python
try:
    registry.get(PaymentGateway)
except RegistryError as e:
    logger.error(f"Registry error: {e}")
```
"""


class RegistryError(Exception):
    """Base exception for all type registry errors."""


class InvalidArgumentError(RegistryError, ValueError):
    """Raised when an operation receives an argument it cannot work with.

    This occurs when:
    - A type argument is None or not a class
    - An instance argument is None
    - An instance argument is itself a class
    """


class ConstructionError(RegistryError):
    """Raised when a default instance of a service type cannot be constructed.

    The exception raised by the constructor is chained as ``__cause__``.
    """

    def __init__(self, service_type: type, reason: BaseException):
        self.service_type = service_type
        self.reason = reason
        super().__init__(f"Cannot construct {service_type.__qualname__}: {reason}")


class ServiceNotFoundError(RegistryError, LookupError):
    """Raised when no service is registered under the requested type."""

    def __init__(self, service_type: type):
        self.service_type = service_type
        super().__init__(f"Service {service_type.__qualname__} not registered")


__all__ = ["ConstructionError", "InvalidArgumentError", "RegistryError", "ServiceNotFoundError"]
