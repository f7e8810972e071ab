"""Exceptions raised (or recorded) by pyqt-polyfield."""

from typing import Any, Optional


class PolyFieldError(Exception):
    """Base class for polymorphic field errors."""


class DiscoveryError(PolyFieldError):
    """Raised when a variant source cannot be loaded during a registry build.

    Never escapes the build: the registry logs it, records it in
    ``VariantRegistry.discovery_errors`` and continues with the other sources.
    """

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to load variant source '{source}': {cause!r}")


class InstantiationError(PolyFieldError):
    """Raised when a variant factory fails while a new value is being selected."""

    def __init__(self, variant: Any, cause: Optional[BaseException] = None, reason: str = ""):
        self.variant = variant
        self.cause = cause
        name = getattr(variant, "name", repr(variant))
        detail = reason or repr(cause)
        super().__init__(f"Could not create '{name}': {detail}")


class ConfigurationError(PolyFieldError):
    """A field disallows None but its contract has no variants.

    Reported rather than raised; the controller falls back to allowing None.
    """

    def __init__(self, contract: type):
        self.contract = contract
        super().__init__(
            f"Field of contract {contract.__name__} disallows None but no variants "
            f"are registered; allowing None instead."
        )
