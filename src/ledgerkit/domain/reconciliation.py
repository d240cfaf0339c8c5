"""Reconciliation between the cash journal and the approved-voucher ledger.

Each mapping pairs a fund account with the ledger subject (and optionally
one auxiliary item) it should agree with. Both sides start from the fund
account's opening balance and only count activity on or after its opening
date.
"""

from concurrent.futures import Executor
from typing import Mapping, Optional, Sequence

from ledgerkit.domain.balance import (
    auxiliary_matches,
    compute_balance,
    journal_movements,
    require_approved,
    voucher_movements,
)
from ledgerkit.domain.entities import (
    DateRange,
    DiffDetails,
    Direction,
    JournalEntry,
    JournalSide,
    LedgerSide,
    ReconciliationMapping,
    ReconciliationRow,
    UnmatchedJournalEntry,
    UnmatchedLedgerLine,
    UnmatchedReason,
    Voucher,
    VoucherStatus,
)


def journal_side(
    mapping: ReconciliationMapping,
    journal_entries: Sequence[JournalEntry],
    date_range: DateRange,
) -> JournalSide:
    account = mapping.fund_account
    movements = journal_movements(journal_entries, account.id, since=account.opening_date)
    window = compute_balance(movements, Direction.DEBIT, account.opening_balance, date_range)
    return JournalSide(
        opening=window.opening,
        period_in=window.debit_total,
        period_out=window.credit_total,
        closing=window.closing,
    )


def ledger_side(
    mapping: ReconciliationMapping,
    approved_vouchers: Sequence[Voucher],
    date_range: DateRange,
) -> LedgerSide:
    account = mapping.fund_account
    movements = voucher_movements(
        approved_vouchers,
        subject_codes=[mapping.subject_code],
        auxiliary_key=mapping.auxiliary_key,
        since=account.opening_date,
    )
    window = compute_balance(movements, mapping.direction, account.opening_balance, date_range)
    return LedgerSide(
        opening=window.opening,
        period_debit=window.debit_total,
        period_credit=window.credit_total,
        closing=window.closing,
    )


def reconcile_mapping(
    mapping: ReconciliationMapping,
    journal_entries: Sequence[JournalEntry],
    approved_vouchers: Sequence[Voucher],
    date_range: DateRange,
) -> ReconciliationRow:
    journal = journal_side(mapping, journal_entries, date_range)
    ledger = ledger_side(mapping, approved_vouchers, date_range)
    return ReconciliationRow(
        fund_account_id=mapping.fund_account.id,
        fund_account_name=mapping.fund_account.name,
        subject_code=mapping.subject_code,
        auxiliary_key=mapping.auxiliary_key,
        journal_side=journal,
        ledger_side=ledger,
        diff=journal.closing - ledger.closing,
        diff_opening=journal.opening - ledger.opening,
        diff_in=journal.period_in - ledger.period_debit,
        diff_out=journal.period_out - ledger.period_credit,
    )


def reconcile(
    mappings: Sequence[ReconciliationMapping],
    journal_entries: Sequence[JournalEntry],
    approved_vouchers: Sequence[Voucher],
    date_range: DateRange,
    executor: Optional[Executor] = None,
) -> tuple[ReconciliationRow, ...]:
    """One reconciliation row per mapping, zero differences included.

    Args:
        mappings: Fund account to subject mappings, in output order
        journal_entries: Cash-journal entries
        approved_vouchers: Vouchers already filtered to approved ones
        date_range: Reporting window
        executor: Optional executor for per-mapping work; output keeps
            mapping order

    Raises:
        UnapprovedVoucherError: If a voucher is not approved
    """
    journal_entries = list(journal_entries)
    approved_vouchers = require_approved(approved_vouchers)

    def reconcile_one(mapping: ReconciliationMapping) -> ReconciliationRow:
        return reconcile_mapping(mapping, journal_entries, approved_vouchers, date_range)

    mapper = executor.map if executor is not None else map
    return tuple(mapper(reconcile_one, mappings))


def diff_details(
    mapping: ReconciliationMapping,
    journal_entries: Sequence[JournalEntry],
    approved_vouchers: Sequence[Voucher],
    date_range: DateRange,
    voucher_statuses: Optional[Mapping[str, VoucherStatus]] = None,
) -> DiffDetails:
    """Entries present on one side only, matched by voucher code.

    Journal entries in range are unmatched when they link no voucher, link a
    voucher that is not approved, or link a code that is not known at all.
    Approved voucher lines in range for the mapped subject (and auxiliary
    item, if set) are unmatched when no journal entry of the account links
    their voucher code. Amounts are not compared.

    Args:
        mapping: Mapping to explain
        journal_entries: Cash-journal entries
        approved_vouchers: Vouchers already filtered to approved ones
        date_range: Reporting window
        voucher_statuses: Status of every voucher code in the book, drafts
            included, to tell unapproved vouchers from missing ones

    Raises:
        UnapprovedVoucherError: If a voucher in ``approved_vouchers`` is not approved
    """
    account = mapping.fund_account
    approved_vouchers = require_approved(approved_vouchers)
    statuses = dict(voucher_statuses or {})
    approved_codes = {voucher.code for voucher in approved_vouchers}
    approved_codes.update(
        code for code, status in statuses.items() if status is VoucherStatus.APPROVED
    )

    account_entries = [
        entry
        for entry in journal_entries
        if entry.fund_account_id == account.id and entry.date >= account.opening_date
    ]

    only_in_journal = []
    for entry in account_entries:
        if not date_range.contains(entry.date):
            continue
        code = entry.linked_voucher_code
        if not code:
            reason = UnmatchedReason.NO_VOUCHER
        elif code in approved_codes:
            continue
        elif code in statuses:
            reason = UnmatchedReason.VOUCHER_NOT_APPROVED
        else:
            reason = UnmatchedReason.VOUCHER_MISSING
        only_in_journal.append(UnmatchedJournalEntry(entry=entry, reason=reason))

    linked_codes = {entry.linked_voucher_code for entry in account_entries if entry.linked_voucher_code}

    only_in_ledger = []
    for voucher in approved_vouchers:
        if not date_range.contains(voucher.date) or voucher.date < account.opening_date:
            continue
        if voucher.code in linked_codes:
            continue
        for line in voucher.lines:
            if line.subject_code != mapping.subject_code:
                continue
            if not auxiliary_matches(mapping.auxiliary_key, line.auxiliary_key):
                continue
            only_in_ledger.append(
                UnmatchedLedgerLine(voucher_code=voucher.code, date=voucher.date, line=line)
            )

    return DiffDetails(
        only_in_journal=tuple(only_in_journal),
        only_in_ledger=tuple(only_in_ledger),
    )
