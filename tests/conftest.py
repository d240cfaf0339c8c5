"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from datetime import date

import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.entities import CategoryKind, Direction, VoucherLine, VoucherStatus
from ledgerkit.domain.money import Money
from ledgerkit.domain.reports import ReportService


def money(text: str) -> Money:
    return Money.from_decimal_string(text)


ZERO = Money.zero()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def sample_book(temp_db):
    """Seed a small book covering April 2025.

    Chart: 1001 Cash, 1002 Bank, 1122 Receivables, 2001 Loans (credit),
    6001 Revenue (credit), 6602 Admin expenses with 660201 Office and
    660202 Travel. Cash and Bank are fund accounts; the Cash journal has one
    entry without a voucher, one linked to a draft voucher and one linked to
    a voucher code that does not exist.
    """
    db = temp_db
    ids = {}
    for code, name, direction in [
        ("1001", "Cash", Direction.DEBIT),
        ("1002", "Bank Deposits", Direction.DEBIT),
        ("1122", "Accounts Receivable", Direction.DEBIT),
        ("2001", "Short-term Loans", Direction.CREDIT),
        ("6001", "Revenue", Direction.CREDIT),
        ("6602", "Admin Expenses", Direction.DEBIT),
        ("660201", "Office", Direction.DEBIT),
        ("660202", "Travel", Direction.DEBIT),
    ]:
        ids[code] = db.create_subject(code=code, name=name, direction=direction)

    db.create_auxiliary_item(key="C01", name="Customer One", category="customer")
    db.create_auxiliary_item(key="C02", name="Customer Two", category="customer")

    db.set_initial_balance("1001", money("1000.00"), ZERO, ZERO)
    db.set_initial_balance("2001", money("1000.00"), ZERO, ZERO)

    def voucher(code, day, lines, status=VoucherStatus.APPROVED):
        db.create_voucher(code=code, date=day, status=status, lines=lines)

    voucher("V004", date(2025, 3, 20), [
        VoucherLine("1122", money("200.00"), ZERO, "Credit sale", auxiliary_key="C01"),
        VoucherLine("6001", ZERO, money("200.00"), "Credit sale"),
    ])
    voucher("V001", date(2025, 4, 5), [
        VoucherLine("1001", money("500.00"), ZERO, "Cash sale"),
        VoucherLine("6001", ZERO, money("500.00"), "Cash sale"),
    ])
    voucher("V002", date(2025, 4, 10), [
        VoucherLine("660201", money("300.00"), ZERO, "Office supplies"),
        VoucherLine("1001", ZERO, money("300.00"), "Office supplies"),
    ])
    voucher("V003", date(2025, 4, 12), [
        VoucherLine("660202", money("100.00"), ZERO, "Taxi"),
        VoucherLine("1001", ZERO, money("100.00"), "Taxi"),
    ], status=VoucherStatus.DRAFT)
    voucher("V007", date(2025, 4, 18), [
        VoucherLine("1122", money("50.00"), ZERO, "Credit sale", auxiliary_key="C02"),
        VoucherLine("6001", ZERO, money("50.00"), "Credit sale"),
    ])
    voucher("V005", date(2025, 4, 25), [
        VoucherLine("660202", money("80.00"), ZERO, "Train ticket"),
        VoucherLine("1001", ZERO, money("80.00"), "Train ticket"),
    ])
    voucher("V006", date(2025, 4, 28), [
        VoucherLine("1002", money("100.00"), ZERO, "Deposit cash"),
        VoucherLine("1001", ZERO, money("100.00"), "Deposit cash"),
    ])

    ids["sales"] = db.create_category("Sales", CategoryKind.INCOME)
    ids["office"] = db.create_category("Office", CategoryKind.EXPENSE)
    ids["travel"] = db.create_category("Travel", CategoryKind.EXPENSE)
    ids["unused"] = db.create_category("Rent", CategoryKind.EXPENSE)

    ids["cash"] = db.create_fund_account("Cash", "1001", date(2025, 1, 1), money("1000.00"))
    ids["bank"] = db.create_fund_account("Bank", "1002", date(2025, 4, 1), ZERO)

    def entry(account, day, income="0", expense="0", **kwargs):
        return db.create_journal_entry(
            date=day,
            fund_account_id=ids[account],
            income=money(income),
            expense=money(expense),
            **kwargs,
        )

    # Before the Bank account's opening date: ignored everywhere
    ids["e0"] = entry("bank", date(2025, 3, 15), income="999.00")
    ids["e1"] = entry("cash", date(2025, 4, 5), income="500.00",
                      category_id=ids["sales"], linked_voucher_code="V001", summary="Cash sale")
    ids["e2"] = entry("cash", date(2025, 4, 10), expense="300.00",
                      category_id=ids["office"], linked_voucher_code="V002", summary="Office supplies")
    ids["e4"] = entry("cash", date(2025, 4, 12), expense="100.00",
                      category_id=ids["travel"], linked_voucher_code="V003", summary="Taxi")
    ids["e3"] = entry("cash", date(2025, 4, 15), income="200.00", summary="Deposit not booked")
    ids["e5"] = entry("cash", date(2025, 4, 20), expense="50.00",
                      linked_voucher_code="V099", summary="Voucher deleted")
    ids["e6"] = entry("cash", date(2025, 4, 28), expense="100.00",
                      linked_voucher_code="V006", is_internal_transfer=True)
    ids["e7"] = entry("bank", date(2025, 4, 28), income="100.00",
                      linked_voucher_code="V006", is_internal_transfer=True)
    return ids


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
