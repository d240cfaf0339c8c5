"""Tests for journal/ledger reconciliation."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from ledgerkit.domain.entities import (
    DateRange,
    Direction,
    FundAccount,
    JournalEntry,
    ReconciliationMapping,
    UnmatchedReason,
    Voucher,
    VoucherLine,
    VoucherStatus,
)
from ledgerkit.domain.errors import UnapprovedVoucherError
from ledgerkit.domain.money import Money
from ledgerkit.domain.reconciliation import diff_details, reconcile

APRIL = DateRange(date(2025, 4, 1), date(2025, 4, 30))
ZERO = Money.zero()
CASH = FundAccount(1, "Cash", "1001", date(2025, 1, 1), Money.from_decimal_string("1000.00"))
BANK = FundAccount(2, "Bank", "1002", date(2025, 1, 1), Money.from_decimal_string("500.00"))


def _m(text):
    return Money.from_decimal_string(text)


def _entry(entry_id, account, day, income="0", expense="0", voucher=None, summary=""):
    return JournalEntry(
        id=entry_id,
        date=day,
        fund_account_id=account.id,
        income=_m(income),
        expense=_m(expense),
        linked_voucher_code=voucher,
        summary=summary,
    )


def _voucher(code, day, *lines, status=VoucherStatus.APPROVED):
    return Voucher(id=int(code[1:]), code=code, date=day, status=status, lines=tuple(lines))


def _line(subject_code, debit="0", credit="0", aux=None):
    return VoucherLine(subject_code, _m(debit), _m(credit), auxiliary_key=aux)


@pytest.fixture
def mappings():
    return [ReconciliationMapping.for_account(CASH), ReconciliationMapping.for_account(BANK)]


@pytest.fixture
def journal():
    return [
        _entry(1, CASH, date(2025, 4, 3), income="1000.00", voucher="V1"),
        _entry(2, CASH, date(2025, 4, 9), income="200.00", summary="Customer paid in cash"),
        _entry(3, CASH, date(2025, 4, 14), expense="200.00", voucher="V2"),
        _entry(4, BANK, date(2025, 4, 20), income="300.00", voucher="V3"),
    ]


@pytest.fixture
def vouchers():
    return [
        _voucher("V1", date(2025, 4, 3), _line("1001", debit="1000.00"), _line("6001", credit="1000.00")),
        _voucher("V2", date(2025, 4, 14), _line("6602", debit="200.00"), _line("1001", credit="200.00")),
        _voucher("V3", date(2025, 4, 20), _line("1002", debit="300.00"), _line("6001", credit="300.00")),
    ]


def test_cash_difference_is_explained_by_entry_without_voucher(mappings, journal, vouchers):
    cash_row, bank_row = reconcile(mappings, journal, vouchers, APRIL)

    assert cash_row.journal_side.closing == _m("2000.00")
    assert cash_row.ledger_side.closing == _m("1800.00")
    assert cash_row.diff == _m("200.00")
    assert cash_row.diff_in == _m("200.00")
    assert cash_row.diff_out == ZERO
    assert cash_row.diff_opening == ZERO

    details = diff_details(mappings[0], journal, vouchers, APRIL)
    assert [item.reason.label for item in details.only_in_journal] == ["未生成凭证"]
    assert Money.sum(item.net for item in details.only_in_journal) == _m("200.00")
    assert details.only_in_ledger == ()

    # Zero-difference rows are still reported
    assert bank_row.diff == ZERO
    assert bank_row.is_reconciled
    assert diff_details(mappings[1], journal, vouchers, APRIL).is_empty


def test_rows_keep_mapping_order_and_keys(mappings, journal, vouchers):
    rows = reconcile(list(reversed(mappings)), journal, vouchers, APRIL)
    assert [row.fund_account_name for row in rows] == ["Bank", "Cash"]
    assert rows[1].key == (1, "1001", None)


def test_both_sides_start_from_opening_balance(mappings, journal, vouchers):
    cash_row = reconcile(mappings, journal, vouchers, APRIL)[0]
    assert cash_row.journal_side.opening == cash_row.ledger_side.opening == _m("1000.00")
    assert cash_row.journal_side.period_in == _m("1200.00")
    assert cash_row.journal_side.period_out == _m("200.00")
    assert cash_row.ledger_side.period_debit == _m("1000.00")
    assert cash_row.ledger_side.period_credit == _m("200.00")


def test_activity_before_opening_date_is_ignored(vouchers):
    late = FundAccount(3, "Petty Cash", "1001", date(2025, 4, 10), _m("50.00"))
    entries = [
        _entry(1, late, date(2025, 4, 3), income="1000.00", voucher="V1"),
        _entry(2, late, date(2025, 4, 14), expense="200.00", voucher="V2"),
    ]
    (row,) = reconcile([ReconciliationMapping.for_account(late)], entries, vouchers, APRIL)
    assert row.journal_side.closing == _m("-150.00")
    assert row.ledger_side.closing == _m("-150.00")
    assert row.is_reconciled


def test_three_unmatched_reasons_are_distinguished():
    entries = [
        _entry(1, CASH, date(2025, 4, 1), income="10.00"),
        _entry(2, CASH, date(2025, 4, 2), income="20.00", voucher="V8"),
        _entry(3, CASH, date(2025, 4, 3), income="30.00", voucher="V9"),
        _entry(4, CASH, date(2025, 4, 4), income="40.00", voucher="V7"),
    ]
    approved = [_voucher("V7", date(2025, 4, 4), _line("1001", debit="40.00"), _line("6001", credit="40.00"))]
    statuses = {"V7": VoucherStatus.APPROVED, "V8": VoucherStatus.DRAFT}

    details = diff_details(ReconciliationMapping.for_account(CASH), entries, approved, APRIL, statuses)

    assert [(item.entry.id, item.reason) for item in details.only_in_journal] == [
        (1, UnmatchedReason.NO_VOUCHER),
        (2, UnmatchedReason.VOUCHER_NOT_APPROVED),
        (3, UnmatchedReason.VOUCHER_MISSING),
    ]
    assert [item.reason.label for item in details.only_in_journal] == ["未生成凭证", "凭证未审核", "凭证被删除"]


def test_only_in_ledger_is_an_anti_join_on_voucher_code():
    entries = [_entry(1, CASH, date(2025, 4, 2), income="99.00", voucher="V1")]
    approved = [
        # Linked but with a different amount: not listed
        _voucher("V1", date(2025, 4, 2), _line("1001", debit="100.00"), _line("6001", credit="100.00")),
        _voucher("V2", date(2025, 4, 5), _line("1001", credit="25.00"), _line("6602", debit="25.00")),
        _voucher("V3", date(2025, 5, 5), _line("1001", credit="70.00"), _line("6602", debit="70.00")),
    ]
    details = diff_details(ReconciliationMapping.for_account(CASH), entries, approved, APRIL)
    assert details.only_in_journal == ()
    assert [(item.voucher_code, item.net) for item in details.only_in_ledger] == [("V2", _m("-25.00"))]


def test_voucher_linked_outside_range_counts_as_matched():
    entries = [
        _entry(1, CASH, date(2025, 3, 30), income="5.00", voucher="V2"),
        _entry(2, CASH, date(2025, 4, 2), income="5.00", voucher="V1"),
    ]
    approved = [
        _voucher("V1", date(2025, 3, 31), _line("1001", debit="5.00"), _line("6001", credit="5.00")),
        _voucher("V2", date(2025, 4, 1), _line("1001", debit="5.00"), _line("6001", credit="5.00")),
    ]
    details = diff_details(ReconciliationMapping.for_account(CASH), entries, approved, APRIL)
    assert details.is_empty


def test_auxiliary_mapping_matches_exactly():
    account = FundAccount(3, "Bank A", "1002", date(2025, 1, 1), ZERO, related_auxiliary_key="BANK-A")
    approved = [
        _voucher("V1", date(2025, 4, 2), _line("1002", debit="10.00", aux="BANK-A"), _line("6001", credit="10.00")),
        _voucher("V2", date(2025, 4, 3), _line("1002", debit="20.00", aux="BANK-AB"), _line("6001", credit="20.00")),
        _voucher("V3", date(2025, 4, 4), _line("1002", debit="40.00"), _line("6001", credit="40.00")),
    ]
    tagged = ReconciliationMapping.for_account(account)
    broad = ReconciliationMapping(account, "1002")

    (tagged_row,) = reconcile([tagged], [], approved, APRIL)
    (broad_row,) = reconcile([broad], [], approved, APRIL)

    assert tagged_row.ledger_side.closing == _m("10.00")
    assert broad_row.ledger_side.closing == _m("70.00")
    assert [i.voucher_code for i in diff_details(tagged, [], approved, APRIL).only_in_ledger] == ["V1"]


def test_ledger_direction_can_be_overridden(journal, vouchers):
    mapping = ReconciliationMapping(CASH, "1001", direction=Direction.CREDIT)
    (row,) = reconcile([mapping], journal, vouchers, APRIL)
    assert row.ledger_side.closing == _m("200.00")


def test_nonzero_diff_always_has_unmatched_entries(mappings, journal, vouchers):
    extra_vouchers = vouchers + [
        _voucher("V4", date(2025, 4, 22), _line("1002", credit="45.00"), _line("6602", debit="45.00")),
    ]
    for mapping, row in zip(mappings, reconcile(mappings, journal, extra_vouchers, APRIL)):
        details = diff_details(mapping, journal, extra_vouchers, APRIL)
        assert row.diff == row.journal_side.closing - row.ledger_side.closing
        if row.diff.is_zero():
            continue
        assert not details.is_empty
        explained = Money.sum(i.net for i in details.only_in_journal) - Money.sum(
            i.net for i in details.only_in_ledger
        )
        assert explained == row.diff


def test_unapproved_voucher_fails_loudly(mappings, journal, vouchers):
    draft = _voucher("V5", date(2025, 4, 2), _line("1001", debit="1.00"), status=VoucherStatus.DRAFT)
    with pytest.raises(UnapprovedVoucherError):
        reconcile(mappings, journal, vouchers + [draft], APRIL)
    with pytest.raises(UnapprovedVoucherError):
        diff_details(mappings[0], journal, vouchers + [draft], APRIL)


def test_reconcile_is_idempotent_and_executor_keeps_order(mappings, journal, vouchers):
    many = mappings * 10
    serial = reconcile(many, journal, vouchers, APRIL)
    assert serial == reconcile(many, journal, vouchers, APRIL)
    with ThreadPoolExecutor(max_workers=4) as executor:
        assert reconcile(many, journal, vouchers, APRIL, executor=executor) == serial
