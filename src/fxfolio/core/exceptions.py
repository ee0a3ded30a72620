"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InvalidMoneyError(AppError):
    """Raised when a Money value is built from a bad amount or currency code."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_MONEY")


class CurrencyMismatchError(AppError):
    """Raised when combining or comparing Money of different currencies."""

    def __init__(self, operation: str, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(
            f"Cannot {operation} {left} and {right}. Convert to same currency first.",
            code="CURRENCY_MISMATCH",
        )


class RateUnavailableError(AppError):
    """Raised when neither a live nor a fallback rate exists for a pair."""

    def __init__(self, base: str, target: str):
        self.base = base
        self.target = target
        super().__init__(
            f"No exchange rate available for {base} to {target}",
            code="RATE_UNAVAILABLE",
        )


class PersistenceError(AppError):
    """Raised by the persistence layer; passed through services unchanged."""

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_ERROR")


class InsufficientQuantityError(AppError):
    """Raised when attempting to sell more units than held."""

    def __init__(self, symbol: str, requested: str, available: str):
        super().__init__(
            f"Insufficient quantity of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_QUANTITY",
        )


class RateSourceError(Exception):
    """Raised by a rate source when a fetch fails or the payload is unusable."""
