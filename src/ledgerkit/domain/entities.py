"""Domain model entities for ledgerkit.

These are pure data classes for the chart of accounts, vouchers, the cash
journal and the report rows produced from them. They are independent of the
database schema so the ledger engine can be called with data from any
source.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from ledgerkit.domain.errors import InvalidRange, invalid_range
from ledgerkit.domain.money import DEFAULT_SCALE, Money


class Direction(Enum):
    """Normal balance direction of a subject."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def label(self) -> str:
        return "借" if self is Direction.DEBIT else "贷"

    @property
    def opposite(self) -> "Direction":
        return Direction.CREDIT if self is Direction.DEBIT else Direction.DEBIT


class BalanceSide(Enum):
    """Side on which a balance currently sits."""

    DEBIT = "debit"
    CREDIT = "credit"
    FLAT = "flat"

    @property
    def label(self) -> str:
        return {"debit": "借", "credit": "贷", "flat": "平"}[self.value]

    @classmethod
    def of(cls, balance: Money, direction: Direction) -> "BalanceSide":
        """Side of a balance expressed in ``direction`` terms."""
        if balance.is_zero():
            return cls.FLAT
        side = direction if balance.is_positive() else direction.opposite
        return cls(side.value)


class VoucherStatus(Enum):
    DRAFT = "draft"
    APPROVED = "approved"


class CategoryKind(Enum):
    INCOME = "income"
    EXPENSE = "expense"
    UNCATEGORIZED = "uncategorized"


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidRange(invalid_range(self.start, self.end))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def fiscal_year_start(self, start_month: int = 1) -> date:
        """First day of the fiscal year containing ``end``."""
        year = self.end.year if self.end.month >= start_month else self.end.year - 1
        return date(year, start_month, 1)

    def year_to_date(self, start_month: int = 1) -> "DateRange":
        """Window from fiscal year start to ``end``."""
        return DateRange(self.fiscal_year_start(start_month), self.end)


@dataclass(frozen=True)
class Subject:
    """Chart-of-accounts node."""

    id: int
    code: str
    name: str
    normal_direction: Optional[Direction]
    parent_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class AuxiliaryItem:
    """Sub-ledger tag (customer, project, ...) narrowing a subject."""

    key: str
    name: str
    category: Optional[str] = None


@dataclass(frozen=True)
class Movement:
    """Dated debit/credit movement consumed by the balance accumulator.

    ``key`` is a subject code for voucher lines or a fund account id for
    cash-journal entries. ``source_ref`` is the voucher code or entry id.
    """

    date: date
    debit: Money
    credit: Money
    key: str
    auxiliary_key: Optional[str] = None
    source_ref: Optional[str] = None
    summary: str = ""


@dataclass(frozen=True)
class VoucherLine:
    subject_code: str
    debit: Money
    credit: Money
    summary: str = ""
    auxiliary_key: Optional[str] = None


@dataclass(frozen=True)
class Voucher:
    """Double-entry voucher."""

    id: int
    code: str
    date: date
    status: VoucherStatus
    lines: tuple[VoucherLine, ...] = ()


@dataclass(frozen=True)
class Category:
    """Cash-journal income/expense category."""

    id: int
    name: str
    kind: CategoryKind


@dataclass(frozen=True)
class JournalEntry:
    """Cashier's journal entry against one fund account."""

    id: int
    date: date
    fund_account_id: int
    income: Money
    expense: Money
    category_id: Optional[int] = None
    linked_voucher_code: Optional[str] = None
    summary: str = ""
    is_internal_transfer: bool = False


@dataclass(frozen=True)
class FundAccount:
    """Cash or bank account tracked through the cash journal."""

    id: int
    name: str
    related_subject_code: str
    opening_date: date
    opening_balance: Money
    related_auxiliary_key: Optional[str] = None


@dataclass(frozen=True)
class InitialBalance:
    """Setup figures for a subject (or subject + auxiliary item).

    ``effective_date`` is the book's start date; the year-to-date seed only
    counts toward a fiscal year that contains it. ``None`` means it always
    counts.
    """

    subject_code: str
    opening_balance: Money
    year_to_date_debit: Money
    year_to_date_credit: Money
    auxiliary_key: Optional[str] = None
    effective_date: Optional[date] = None

    @classmethod
    def empty(cls, subject_code: str, scale: int = DEFAULT_SCALE) -> "InitialBalance":
        zero = Money.zero(scale)
        return cls(subject_code, zero, zero, zero)


@dataclass(frozen=True)
class BalanceWindow:
    """Opening, period totals and closing for one date window."""

    opening: Money
    debit_total: Money
    credit_total: Money
    closing: Money


@dataclass(frozen=True)
class LedgerRow:
    date: date
    ref: Optional[str]
    summary: str
    debit: Money
    credit: Money
    direction: BalanceSide
    running_balance: Money


@dataclass(frozen=True)
class LedgerReport:
    """One detailed-ledger page."""

    subject_code: str
    subject_name: str
    direction: Direction
    auxiliary_key: Optional[str]
    date_range: DateRange
    opening: Money
    rows: tuple[LedgerRow, ...]
    period_debit_total: Money
    period_credit_total: Money
    year_debit_total: Money
    year_credit_total: Money
    closing: Money

    @property
    def opening_side(self) -> BalanceSide:
        return BalanceSide.of(self.opening, self.direction)

    @property
    def closing_side(self) -> BalanceSide:
        return BalanceSide.of(self.closing, self.direction)


@dataclass(frozen=True)
class SubjectBalanceRow:
    """Subject balance report line."""

    subject_id: int
    code: str
    name: str
    level: int
    is_leaf: bool
    direction: Direction
    opening: Money
    period_debit: Money
    period_credit: Money
    year_debit: Money
    year_credit: Money
    closing: Money


@dataclass(frozen=True)
class TrialBalanceResult:
    rolled_up: dict[int, Money]
    debit_total: Money
    credit_total: Money
    is_balanced: bool
    diff: Money
    tolerance: Money = field(default_factory=Money.zero)


@dataclass(frozen=True)
class AccountSummary:
    fund_account_id: int
    name: str
    opening: Money
    income: Money
    expense: Money
    closing: Money


@dataclass(frozen=True)
class CategorySummary:
    category_id: Optional[int]
    name: str
    kind: CategoryKind
    income: Money
    expense: Money
    count: int


@dataclass(frozen=True)
class FundSummary:
    by_account: tuple[AccountSummary, ...]
    by_category: tuple[CategorySummary, ...]


@dataclass(frozen=True)
class ReconciliationMapping:
    """Fund account paired with the ledger subject it should agree with."""

    fund_account: FundAccount
    subject_code: str
    auxiliary_key: Optional[str] = None
    direction: Direction = Direction.DEBIT

    @classmethod
    def for_account(cls, account: FundAccount) -> "ReconciliationMapping":
        return cls(
            fund_account=account,
            subject_code=account.related_subject_code,
            auxiliary_key=account.related_auxiliary_key,
        )


@dataclass(frozen=True)
class JournalSide:
    opening: Money
    period_in: Money
    period_out: Money
    closing: Money


@dataclass(frozen=True)
class LedgerSide:
    opening: Money
    period_debit: Money
    period_credit: Money
    closing: Money


@dataclass(frozen=True)
class ReconciliationRow:
    fund_account_id: int
    fund_account_name: str
    subject_code: str
    auxiliary_key: Optional[str]
    journal_side: JournalSide
    ledger_side: LedgerSide
    diff: Money
    diff_opening: Money
    diff_in: Money
    diff_out: Money

    @property
    def key(self) -> tuple[int, str, Optional[str]]:
        return (self.fund_account_id, self.subject_code, self.auxiliary_key)

    @property
    def is_reconciled(self) -> bool:
        return self.diff.is_zero()


class UnmatchedReason(Enum):
    """Why a journal entry has no approved voucher counterpart."""

    NO_VOUCHER = "no_voucher"
    VOUCHER_NOT_APPROVED = "voucher_not_approved"
    VOUCHER_MISSING = "voucher_missing"

    @property
    def label(self) -> str:
        return {
            "no_voucher": "未生成凭证",
            "voucher_not_approved": "凭证未审核",
            "voucher_missing": "凭证被删除",
        }[self.value]


@dataclass(frozen=True)
class UnmatchedJournalEntry:
    entry: JournalEntry
    reason: UnmatchedReason

    @property
    def net(self) -> Money:
        return self.entry.income - self.entry.expense


@dataclass(frozen=True)
class UnmatchedLedgerLine:
    voucher_code: str
    date: date
    line: VoucherLine

    @property
    def net(self) -> Money:
        return self.line.debit - self.line.credit


@dataclass(frozen=True)
class DiffDetails:
    only_in_journal: tuple[UnmatchedJournalEntry, ...]
    only_in_ledger: tuple[UnmatchedLedgerLine, ...]

    @property
    def is_empty(self) -> bool:
        return not self.only_in_journal and not self.only_in_ledger
