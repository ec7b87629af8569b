class StorefrontException(Exception):
    """Base class for errors raised by storefront services."""


class NotFound(StorefrontException):
    """An addressed id does not exist in the backing store."""

    def __init__(self, kind: str, ident):
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} not found: {ident}")


class InvalidInput(StorefrontException):
    pass


class ArithmeticPrecondition(InvalidInput):
    """Non-positive quantity, negative price or a mismatched option reference."""


class SelectionInvalid(StorefrontException):
    def __init__(self, violations):
        self.violations = list(violations)
        super().__init__("; ".join(v.message for v in self.violations))


class InvalidTransition(StorefrontException):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from {current} to {requested}")


class ConcurrentModification(StorefrontException):
    pass


class CounterUnavailable(StorefrontException):
    """The display-code counter lock could not be taken in time."""
