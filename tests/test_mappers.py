"""Tests for database mappers."""

from datetime import date

from ledgerkit.database.models import (
    FundAccount as ORMFundAccount,
    InitialBalance as ORMInitialBalance,
    JournalEntry as ORMJournalEntry,
    Subject as ORMSubject,
    Voucher as ORMVoucher,
    VoucherLine as ORMVoucherLine,
)
from ledgerkit.database.mappers import (
    fund_account_to_domain,
    initial_balance_to_domain,
    journal_entry_to_domain,
    subject_to_domain,
    voucher_to_domain,
)
from ledgerkit.domain.entities import Direction, VoucherStatus
from ledgerkit.domain.money import Money


class TestSubjectMapper:
    def test_subject_to_domain(self):
        orm_subject = ORMSubject(id=3, code="2202", name="Payables", direction="credit", parent_id=None, is_active=True)
        subject = subject_to_domain(orm_subject)
        assert subject.id == 3
        assert subject.code == "2202"
        assert subject.normal_direction is Direction.CREDIT

    def test_missing_direction_stays_missing(self):
        orm_subject = ORMSubject(id=4, code="9999", name="Suspense", direction=None, is_active=False)
        assert subject_to_domain(orm_subject).normal_direction is None


class TestVoucherMapper:
    def test_voucher_to_domain_converts_minor_units(self):
        orm_voucher = ORMVoucher(id=1, code="V1", date=date(2025, 4, 1), status="approved")
        orm_voucher.lines.append(
            ORMVoucherLine(position=0, subject_code="1001", auxiliary_key=None, debit=12345, credit=0, summary="in")
        )
        orm_voucher.lines.append(
            ORMVoucherLine(position=1, subject_code="6001", auxiliary_key="C01", debit=0, credit=12345, summary=None)
        )

        voucher = voucher_to_domain(orm_voucher)

        assert voucher.status is VoucherStatus.APPROVED
        assert voucher.lines[0].debit == Money(12345)
        assert voucher.lines[0].credit == Money.zero()
        assert voucher.lines[1].auxiliary_key == "C01"
        assert voucher.lines[1].summary == ""


class TestCashJournalMappers:
    def test_fund_account_to_domain(self):
        orm_account = ORMFundAccount(
            id=2, name="Bank", related_subject_code="1002", related_auxiliary_key="BANK-A",
            opening_date=date(2025, 1, 1), opening_balance=-500,
        )
        account = fund_account_to_domain(orm_account)
        assert account.opening_balance == Money(-500)
        assert account.related_auxiliary_key == "BANK-A"

    def test_journal_entry_to_domain(self):
        orm_entry = ORMJournalEntry(
            id=9, date=date(2025, 4, 2), fund_account_id=2, income=0, expense=250,
            category_id=None, linked_voucher_code=None, summary="fee", is_internal_transfer=True,
        )
        entry = journal_entry_to_domain(orm_entry)
        assert entry.expense == Money(250)
        assert entry.income == Money.zero()
        assert entry.is_internal_transfer is True

    def test_initial_balance_to_domain(self):
        orm_balance = ORMInitialBalance(
            subject_code="1001", auxiliary_key=None, opening_balance=100,
            year_to_date_debit=None, year_to_date_credit=7, effective_date=None,
        )
        balance = initial_balance_to_domain(orm_balance)
        assert balance.opening_balance == Money(100)
        assert balance.year_to_date_debit == Money.zero()
        assert balance.year_to_date_credit == Money(7)
