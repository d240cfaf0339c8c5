"""Shared domain error messages and error types."""

from datetime import date
from typing import Union


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as figures that do not agree."""


class InvalidRange(ValidationError):
    """Date range whose start falls after its end."""


class InvalidSubjectConfiguration(ValidationError):
    """Chart of accounts is malformed (duplicate code, missing direction, ...)."""


class PrecisionOverflow(ValidationError):
    """Decimal input carries more fractional digits than the money scale."""


class ScaleMismatch(ValidationError):
    """Money values with different scales were combined."""


class UnapprovedVoucherError(ValidationError):
    """A voucher that is not approved reached a balance computation."""


class UnknownSubjectReference(NotFoundError):
    """Movement or voucher line references a subject missing from the chart."""


class UnknownFundAccountReference(NotFoundError):
    """Journal entry references a fund account that was not supplied."""


class UnknownCategoryReference(NotFoundError):
    """Journal entry references a category that was not supplied."""


class UnknownAuxiliaryReference(NotFoundError):
    """Ledger query names an auxiliary item that is not on file."""


class UnbalancedInput(ConflictError):
    """Trial balance debits and credits disagree."""

    def __init__(self, message: str, diff=None):
        super().__init__(message)
        self.diff = diff


def invalid_range(start: date, end: date) -> str:
    """Return message for a range whose start is after its end."""
    return f"Invalid date range: start {start.isoformat()} is after end {end.isoformat()}"


def duplicate_subject_code(code: str) -> str:
    """Return message for two subjects sharing one code."""
    return f"Duplicate subject code '{code}'"


def missing_direction(code: str) -> str:
    """Return message for a subject without a normal balance direction."""
    return f"Subject '{code}' has no normal balance direction"


def subject_not_found(code: str) -> str:
    """Return message for a missing subject by code."""
    return f"Subject '{code}' not found"


def fund_account_not_found(account_ref: Union[int, str]) -> str:
    """Return message for a missing fund account."""
    return f"Fund account {account_ref!r} not found"


def category_not_found(category_id: int) -> str:
    """Return message for a missing category."""
    return f"Category {category_id} not found"


def auxiliary_item_not_found(key: str) -> str:
    """Return message for a missing auxiliary item by key."""
    return f"Auxiliary item '{key}' not found"


def voucher_not_approved(code: str, status: str) -> str:
    """Return message when a non-approved voucher is passed to the engine."""
    return (
        f"Voucher '{code}' has status '{status}'; only approved vouchers "
        "may be used for balance computations"
    )


def precision_overflow(text: str, scale: int) -> str:
    """Return message for an amount with too many fractional digits."""
    return f"Amount '{text}' has more than {scale} fractional digit{'s' if scale != 1 else ''}"


def trial_balance_unbalanced(debit_total: str, credit_total: str, diff: str) -> str:
    """Return message for a failed trial balance."""
    return (
        f"Trial balance does not balance: debit total {debit_total}, "
        f"credit total {credit_total}, difference {diff}"
    )
