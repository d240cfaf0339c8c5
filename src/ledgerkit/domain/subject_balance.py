"""Subject balance report (opening, period, year-to-date and closing per subject)."""

from typing import Iterable, Optional, Sequence

from ledgerkit.domain.balance import (
    compute_balance,
    period_totals,
    require_direction,
    voucher_movements,
    year_to_date_seed,
)
from ledgerkit.domain.entities import (
    DateRange,
    InitialBalance,
    Movement,
    SubjectBalanceRow,
    Voucher,
)
from ledgerkit.domain.errors import UnknownSubjectReference, subject_not_found
from ledgerkit.domain.hierarchy import SubjectHierarchy, SubjectNode
from ledgerkit.domain.money import DEFAULT_SCALE, Money


def _group_by_subject(
    movements: Iterable[Movement], hierarchy: SubjectHierarchy
) -> dict[str, list[Movement]]:
    grouped: dict[str, list[Movement]] = {}
    for movement in movements:
        if movement.key not in hierarchy:
            raise UnknownSubjectReference(subject_not_found(movement.key))
        grouped.setdefault(movement.key, []).append(movement)
    return grouped


def _group_initial(
    initial_balances: Iterable[InitialBalance], hierarchy: SubjectHierarchy
) -> dict[str, list[InitialBalance]]:
    grouped: dict[str, list[InitialBalance]] = {}
    for balance in initial_balances:
        if balance.subject_code not in hierarchy:
            raise UnknownSubjectReference(subject_not_found(balance.subject_code))
        grouped.setdefault(balance.subject_code, []).append(balance)
    return grouped


def balance_row(
    hierarchy: SubjectHierarchy,
    node: SubjectNode,
    movements_by_code: dict[str, list[Movement]],
    initial_by_code: dict[str, list[InitialBalance]],
    date_range: DateRange,
    fiscal_year_start_month: int = 1,
    scale: int = DEFAULT_SCALE,
) -> SubjectBalanceRow:
    """Balance line for one subject, aggregating its whole subtree.

    Descendant setup balances are expressed in this subject's direction: a
    descendant with the opposite normal direction contributes negatively.
    """
    direction = require_direction(node.subject.normal_direction, node.code)
    ytd_range = date_range.year_to_date(fiscal_year_start_month)

    seed = Money.zero(scale)
    seed_debit = Money.zero(scale)
    seed_credit = Money.zero(scale)
    member_movements: list[Movement] = []
    for member in (node,) + hierarchy.descendants(node):
        member_movements.extend(movements_by_code.get(member.code, ()))
        balances = initial_by_code.get(member.code, ())
        if not balances:
            continue
        member_direction = require_direction(member.subject.normal_direction, member.code)
        for balance in balances:
            if member_direction is direction:
                seed += balance.opening_balance
            else:
                seed -= balance.opening_balance
            debit, credit = year_to_date_seed(balance, ytd_range)
            seed_debit += debit
            seed_credit += credit

    window = compute_balance(member_movements, direction, seed, date_range)
    ytd_debit, ytd_credit = period_totals(member_movements, ytd_range, scale)

    return SubjectBalanceRow(
        subject_id=node.subject.id,
        code=node.code,
        name=node.subject.name,
        level=node.level,
        is_leaf=node.is_leaf,
        direction=direction,
        opening=window.opening,
        period_debit=window.debit_total,
        period_credit=window.credit_total,
        year_debit=ytd_debit + seed_debit,
        year_credit=ytd_credit + seed_credit,
        closing=window.closing,
    )


def subject_balances(
    hierarchy: SubjectHierarchy,
    vouchers: Sequence[Voucher],
    initial_balances: Iterable[InitialBalance],
    date_range: DateRange,
    fiscal_year_start_month: int = 1,
    code_from: Optional[str] = None,
    code_to: Optional[str] = None,
    level_from: Optional[int] = None,
    level_to: Optional[int] = None,
) -> tuple[SubjectBalanceRow, ...]:
    """Subject balance report over approved vouchers.

    Raises:
        UnapprovedVoucherError: If a voucher is not approved
        UnknownSubjectReference: If a line or initial balance names an unknown subject
        InvalidSubjectConfiguration: If a reported subject has no direction
    """
    movements_by_code = _group_by_subject(voucher_movements(vouchers), hierarchy)
    initial_by_code = _group_initial(initial_balances, hierarchy)
    rows = []
    for node in hierarchy.select(code_from, code_to, level_from, level_to):
        # Inactive subjects are reported only while they still carry history
        if not node.is_active and node.code not in movements_by_code and node.code not in initial_by_code:
            continue
        rows.append(
            balance_row(
                hierarchy,
                node,
                movements_by_code,
                initial_by_code,
                date_range,
                fiscal_year_start_month,
            )
        )
    return tuple(rows)


def leaf_closing_balances(rows: Iterable[SubjectBalanceRow]) -> dict[int, Money]:
    """Closing balance per leaf subject id, for the trial balance."""
    return {row.subject_id: row.closing for row in rows if row.is_leaf}
