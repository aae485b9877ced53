"""Exceptions raised by the spendwise core.

Core code raises these and never handles them itself; the CLI is the only
place that catches them and turns them into user-visible messages.
"""


class SpendwiseError(Exception):
    """
    Base exception for all spendwise errors.

    Carries a human readable message and a stable machine readable code.
    """

    def __init__(self, message: str, code: str = "SPENDWISE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(SpendwiseError):
    """Raised when a transaction or settings candidate breaks one or more rules."""

    def __init__(self, errors: dict[str, str]):
        fields = ", ".join(sorted(errors))
        super().__init__(
            message=f"Validation failed for: {fields}",
            code="VALIDATION_ERROR",
        )
        self.errors = dict(errors)


class NotFoundError(SpendwiseError):
    """Raised when a transaction id does not exist in the ledger."""

    def __init__(self, transaction_id: str):
        super().__init__(
            message=f"Transaction not found: {transaction_id}",
            code="NOT_FOUND",
        )
        self.transaction_id = transaction_id


class InvalidFormatError(SpendwiseError):
    """Raised when an import document is malformed."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_FORMAT")


class InvalidCurrencyError(SpendwiseError):
    """Raised when a currency code is missing from the rate table."""

    def __init__(self, currency: str):
        super().__init__(
            message=f"Unsupported currency: {currency}",
            code="INVALID_CURRENCY",
        )
        self.currency = currency


class PersistenceError(SpendwiseError):
    """Raised when reading or writing the durable store fails."""

    def __init__(self, message: str):
        super().__init__(message=message, code="PERSISTENCE_ERROR")
