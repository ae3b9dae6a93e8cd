class CardCatalogError(Exception):
    """Base class for errors raised by the catalog engine."""


class FormatError(CardCatalogError, ValueError):
    """A date string could not be read as a calendar day."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class InvalidPeriodError(CardCatalogError, ValueError):
    """A rotating period descriptor does not describe a real range."""

    def __init__(self, message: str, field: str | None = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


class LifecycleError(CardCatalogError):
    """A version state change that can never be applied."""
