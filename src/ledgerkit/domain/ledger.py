"""Detailed ledger generation."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from ledgerkit.domain.balance import (
    combine_initial_balances,
    compute_balance,
    partition,
    period_totals,
    require_direction,
    signed_amount,
    year_to_date_seed,
)
from ledgerkit.domain.entities import (
    BalanceSide,
    DateRange,
    InitialBalance,
    LedgerReport,
    LedgerRow,
    Movement,
    Subject,
)
from ledgerkit.domain.errors import (
    InvalidSubjectConfiguration,
    UnknownSubjectReference,
    subject_not_found,
)
from ledgerkit.domain.hierarchy import SubjectHierarchy
from ledgerkit.domain.money import DEFAULT_SCALE


class LedgerSortKey(Enum):
    DATE = "date"
    VOUCHER_CODE = "voucher_code"


class ScopeMode(Enum):
    """Which lines of a subject a ledger query covers."""

    SUBJECT = "subject"
    AUXILIARY_ITEM = "auxiliary_item"


@dataclass(frozen=True)
class LedgerScope:
    """Subject-only or subject + one auxiliary item; never both."""

    subject_code: str
    mode: ScopeMode = ScopeMode.SUBJECT
    auxiliary_key: Optional[str] = None

    def __post_init__(self):
        if self.mode is ScopeMode.AUXILIARY_ITEM and not self.auxiliary_key:
            raise InvalidSubjectConfiguration(
                f"Auxiliary ledger for '{self.subject_code}' needs an auxiliary item"
            )
        if self.mode is ScopeMode.SUBJECT and self.auxiliary_key is not None:
            raise InvalidSubjectConfiguration(
                f"Subject ledger for '{self.subject_code}' cannot take an auxiliary item"
            )

    @classmethod
    def subject(cls, code: str) -> "LedgerScope":
        return cls(code)

    @classmethod
    def auxiliary(cls, code: str, auxiliary_key: str) -> "LedgerScope":
        return cls(code, ScopeMode.AUXILIARY_ITEM, auxiliary_key)

    def matches(self, movement: Movement) -> bool:
        if movement.key != self.subject_code:
            return False
        if self.mode is ScopeMode.AUXILIARY_ITEM:
            return movement.auxiliary_key == self.auxiliary_key
        return True


_DIGITS = re.compile(r"(\d+)")


def _voucher_code_key(code: Optional[str]) -> tuple:
    """Natural ordering key for voucher codes: ``V2`` sorts before ``V10``."""
    parts = _DIGITS.split(code or "")
    # split() with a group alternates text and digit runs, so odd positions are digits
    return tuple(int(part) if i % 2 else part for i, part in enumerate(parts))


def _sort_within(movements: list[Movement], sort_key: LedgerSortKey) -> list[Movement]:
    # sorted() is stable: equal keys keep source order
    if sort_key is LedgerSortKey.DATE:
        return sorted(movements, key=lambda m: (m.date, _voucher_code_key(m.source_ref)))
    if sort_key is LedgerSortKey.VOUCHER_CODE:
        return sorted(movements, key=lambda m: _voucher_code_key(m.source_ref))
    raise InvalidSubjectConfiguration(f"Unknown ledger sort key: {sort_key!r}")


def generate(
    subject: Subject,
    movements: Iterable[Movement],
    date_range: DateRange,
    sort_key: LedgerSortKey = LedgerSortKey.DATE,
    scope: Optional[LedgerScope] = None,
    initial_balance: Optional[InitialBalance] = None,
    fiscal_year_start_month: int = 1,
) -> LedgerReport:
    """Build one detailed-ledger page with running balances.

    Args:
        subject: Subject the page is for
        movements: Movements from approved vouchers, in source order
        date_range: Reporting window
        sort_key: Row ordering within the window
        scope: Subject-only (default) or subject + auxiliary item
        initial_balance: Setup figures matching ``scope``
        fiscal_year_start_month: First month of the fiscal year

    Returns:
        LedgerReport with one row per movement in the window

    Raises:
        InvalidSubjectConfiguration: If the subject has no direction or the
            scope or initial balance belongs to another subject
    """
    direction = require_direction(subject.normal_direction, subject.code)
    scope = scope or LedgerScope.subject(subject.code)
    if scope.subject_code != subject.code:
        raise InvalidSubjectConfiguration(
            f"Ledger scope '{scope.subject_code}' does not match subject '{subject.code}'"
        )
    if initial_balance is None:
        initial_balance = InitialBalance.empty(subject.code)
    elif initial_balance.subject_code != subject.code:
        raise InvalidSubjectConfiguration(
            f"Initial balance for '{initial_balance.subject_code}' given to ledger of '{subject.code}'"
        )
    scale = initial_balance.opening_balance.scale

    selected = [m for m in movements if scope.matches(m)]
    window = compute_balance(selected, direction, initial_balance.opening_balance, date_range)
    _, within = partition(selected, date_range)

    running = window.opening
    rows = []
    for movement in _sort_within(within, sort_key):
        running = running + signed_amount(movement, direction)
        rows.append(
            LedgerRow(
                date=movement.date,
                ref=movement.source_ref,
                summary=movement.summary,
                debit=movement.debit,
                credit=movement.credit,
                direction=BalanceSide.of(running, direction),
                running_balance=running,
            )
        )

    ytd_range = date_range.year_to_date(fiscal_year_start_month)
    ytd_debit, ytd_credit = period_totals(selected, ytd_range, scale)
    seed_debit, seed_credit = year_to_date_seed(initial_balance, ytd_range)

    return LedgerReport(
        subject_code=subject.code,
        subject_name=subject.name,
        direction=direction,
        auxiliary_key=scope.auxiliary_key,
        date_range=date_range,
        opening=window.opening,
        rows=tuple(rows),
        period_debit_total=window.debit_total,
        period_credit_total=window.credit_total,
        year_debit_total=ytd_debit + seed_debit,
        year_credit_total=ytd_credit + seed_credit,
        closing=window.closing,
    )


def generate_range(
    hierarchy: SubjectHierarchy,
    movements: Sequence[Movement],
    date_range: DateRange,
    code_from: str,
    code_to: Optional[str] = None,
    sort_key: LedgerSortKey = LedgerSortKey.DATE,
    initial_balances: Iterable[InitialBalance] = (),
    fiscal_year_start_month: int = 1,
) -> tuple[LedgerReport, ...]:
    """Ledger pages for every leaf subject with code in ``[code_from, code_to]``.

    Inactive leaves get a page only when they have movements or setup figures.

    Raises:
        UnknownSubjectReference: If a movement references an unknown subject
    """
    for movement in movements:
        if movement.key not in hierarchy:
            raise UnknownSubjectReference(subject_not_found(movement.key))

    initial_balances = list(initial_balances)
    by_subject: dict[str, list[Movement]] = {}
    for movement in movements:
        by_subject.setdefault(movement.key, []).append(movement)

    setup_codes = {balance.subject_code for balance in initial_balances}

    pages = []
    for node in hierarchy.leaves_in_range(code_from, code_to):
        if not node.is_active and node.code not in by_subject and node.code not in setup_codes:
            continue
        pages.append(
            generate(
                node.subject,
                by_subject.get(node.code, []),
                date_range,
                sort_key=sort_key,
                initial_balance=combine_initial_balances(
                    initial_balances, node.code, scale=DEFAULT_SCALE
                ),
                fiscal_year_start_month=fiscal_year_start_month,
            )
        )
    return tuple(pages)
