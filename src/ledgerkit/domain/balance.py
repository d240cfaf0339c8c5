"""Balance accumulation over dated debit/credit movements."""

from datetime import date
from typing import Iterable, Optional, Sequence

from ledgerkit.domain.entities import (
    BalanceWindow,
    DateRange,
    Direction,
    InitialBalance,
    JournalEntry,
    Movement,
    Voucher,
    VoucherStatus,
)
from ledgerkit.domain.errors import (
    InvalidSubjectConfiguration,
    UnapprovedVoucherError,
    missing_direction,
    voucher_not_approved,
)
from ledgerkit.domain.money import DEFAULT_SCALE, Money


def require_direction(direction, code: Optional[str] = None) -> Direction:
    """Return ``direction`` if it is a Direction, else fail without defaulting."""
    if not isinstance(direction, Direction):
        if direction is None and code:
            raise InvalidSubjectConfiguration(missing_direction(code))
        where = f" for subject '{code}'" if code else ""
        raise InvalidSubjectConfiguration(
            f"Missing or invalid balance direction{where}: {direction!r}"
        )
    return direction


def require_approved(vouchers: Iterable[Voucher]) -> list[Voucher]:
    """Check that every voucher is approved.

    Filtering drafts out is the caller's job; a draft reaching this point is a
    caller bug and is reported rather than skipped.
    """
    checked = []
    for voucher in vouchers:
        if voucher.status is not VoucherStatus.APPROVED:
            status = getattr(voucher.status, "value", voucher.status)
            raise UnapprovedVoucherError(voucher_not_approved(voucher.code, status))
        checked.append(voucher)
    return checked


def signed_amount(movement: Movement, direction: Direction) -> Money:
    """Balance change of one movement in ``direction`` terms."""
    if direction is Direction.DEBIT:
        return movement.debit - movement.credit
    return movement.credit - movement.debit


def fold(movements: Iterable[Movement], direction: Direction, scale: int) -> Money:
    """Net balance change of ``movements`` in ``direction`` terms."""
    direction = require_direction(direction)
    return Money.sum((signed_amount(m, direction) for m in movements), scale)


def partition(
    movements: Iterable[Movement], date_range: DateRange
) -> tuple[list[Movement], list[Movement]]:
    """Split movements into (before range start, within range).

    Movements after the range end belong to neither side.
    """
    before: list[Movement] = []
    within: list[Movement] = []
    for movement in movements:
        if movement.date < date_range.start:
            before.append(movement)
        elif movement.date <= date_range.end:
            within.append(movement)
    return before, within


def compute_balance(
    movements: Iterable[Movement],
    direction: Direction,
    opening_balance: Money,
    date_range: DateRange,
) -> BalanceWindow:
    """Compute opening, period totals and closing for ``date_range``.

    Args:
        movements: Movements in any order
        direction: Normal balance direction of the subject or account
        opening_balance: Seed balance preceding every movement
        date_range: Inclusive reporting window

    Returns:
        BalanceWindow with opening, debit/credit totals and closing

    Raises:
        InvalidSubjectConfiguration: If direction is missing or invalid
    """
    direction = require_direction(direction)
    scale = opening_balance.scale
    before, within = partition(movements, date_range)

    opening = opening_balance + fold(before, direction, scale)
    debit_total = Money.sum((m.debit for m in within), scale)
    credit_total = Money.sum((m.credit for m in within), scale)
    if direction is Direction.DEBIT:
        closing = opening + debit_total - credit_total
    else:
        closing = opening + credit_total - debit_total

    return BalanceWindow(
        opening=opening,
        debit_total=debit_total,
        credit_total=credit_total,
        closing=closing,
    )


def period_totals(movements: Iterable[Movement], date_range: DateRange, scale: int) -> tuple[Money, Money]:
    """Debit and credit totals of movements inside ``date_range``."""
    _, within = partition(movements, date_range)
    return (
        Money.sum((m.debit for m in within), scale),
        Money.sum((m.credit for m in within), scale),
    )


def auxiliary_matches(mapping_key: Optional[str], line_key: Optional[str]) -> bool:
    """Exact auxiliary match; an unset mapping key matches every line."""
    return mapping_key is None or mapping_key == line_key


def voucher_movements(
    vouchers: Iterable[Voucher],
    subject_codes: Optional[Sequence[str]] = None,
    auxiliary_key: Optional[str] = None,
    since: Optional[date] = None,
) -> list[Movement]:
    """Flatten approved voucher lines into movements.

    Args:
        vouchers: Approved vouchers
        subject_codes: Only keep lines posted to these subject codes
        auxiliary_key: Only keep lines with this exact auxiliary tag
        since: Only keep vouchers dated on or after this day

    Raises:
        UnapprovedVoucherError: If a voucher is not approved
    """
    wanted = None if subject_codes is None else set(subject_codes)
    movements = []
    for voucher in require_approved(vouchers):
        if since is not None and voucher.date < since:
            continue
        for line in voucher.lines:
            if wanted is not None and line.subject_code not in wanted:
                continue
            if not auxiliary_matches(auxiliary_key, line.auxiliary_key):
                continue
            movements.append(
                Movement(
                    date=voucher.date,
                    debit=line.debit,
                    credit=line.credit,
                    key=line.subject_code,
                    auxiliary_key=line.auxiliary_key,
                    source_ref=voucher.code,
                    summary=line.summary,
                )
            )
    return movements


def journal_movements(
    entries: Iterable[JournalEntry],
    fund_account_id: int,
    since: Optional[date] = None,
) -> list[Movement]:
    """Flatten one fund account's journal entries (income as debit, expense as credit)."""
    return [
        Movement(
            date=entry.date,
            debit=entry.income,
            credit=entry.expense,
            key=str(entry.fund_account_id),
            source_ref=str(entry.id),
            summary=entry.summary,
        )
        for entry in entries
        if entry.fund_account_id == fund_account_id
        and (since is None or entry.date >= since)
    ]


def combine_initial_balances(
    initial_balances: Iterable[InitialBalance],
    subject_code: str,
    auxiliary_key: Optional[str] = None,
    scale: int = DEFAULT_SCALE,
) -> InitialBalance:
    """Merge setup figures for one subject.

    Without ``auxiliary_key`` every entry for the subject counts (subject
    level and per auxiliary item); with it only that item's entries count.
    """
    opening = debit = credit = Money.zero(scale)
    effective: Optional[date] = None
    for balance in initial_balances:
        if balance.subject_code != subject_code:
            continue
        if auxiliary_key is not None and balance.auxiliary_key != auxiliary_key:
            continue
        opening += balance.opening_balance
        debit += balance.year_to_date_debit
        credit += balance.year_to_date_credit
        if balance.effective_date is not None:
            effective = balance.effective_date if effective is None else min(effective, balance.effective_date)
    return InitialBalance(
        subject_code=subject_code,
        opening_balance=opening,
        year_to_date_debit=debit,
        year_to_date_credit=credit,
        auxiliary_key=auxiliary_key,
        effective_date=effective,
    )


def year_to_date_seed(initial: InitialBalance, ytd_range: DateRange) -> tuple[Money, Money]:
    """Setup year-to-date debit/credit that belong to ``ytd_range``."""
    if initial.effective_date is None or ytd_range.contains(initial.effective_date):
        return initial.year_to_date_debit, initial.year_to_date_credit
    zero = Money.zero(initial.opening_balance.scale)
    return zero, zero
