"""Mapper functions to convert SQLAlchemy models into domain entities.

Amount columns hold integer minor units; they become ``Money`` at the book
scale here, so the rest of the code never sees raw integers.
"""

from typing import Optional

from ledgerkit.domain import entities as domain
from ledgerkit.domain.money import DEFAULT_SCALE, Money
from ledgerkit.database.models import (
    AuxiliaryItem as ORMAuxiliaryItem,
    Category as ORMCategory,
    FundAccount as ORMFundAccount,
    InitialBalance as ORMInitialBalance,
    JournalEntry as ORMJournalEntry,
    Subject as ORMSubject,
    Voucher as ORMVoucher,
    VoucherLine as ORMVoucherLine,
)


def _money(minor_units: Optional[int]) -> Money:
    return Money(int(minor_units or 0), DEFAULT_SCALE)


def subject_to_domain(orm_subject: ORMSubject) -> domain.Subject:
    """Convert SQLAlchemy Subject model to domain Subject entity."""
    direction = domain.Direction(orm_subject.direction) if orm_subject.direction else None
    return domain.Subject(
        id=orm_subject.id,
        code=orm_subject.code,
        name=orm_subject.name,
        normal_direction=direction,
        parent_id=orm_subject.parent_id,
        is_active=orm_subject.is_active,
    )


def auxiliary_item_to_domain(orm_item: ORMAuxiliaryItem) -> domain.AuxiliaryItem:
    """Convert SQLAlchemy AuxiliaryItem model to domain AuxiliaryItem entity."""
    return domain.AuxiliaryItem(
        key=orm_item.key,
        name=orm_item.name,
        category=orm_item.category,
    )


def voucher_line_to_domain(orm_line: ORMVoucherLine) -> domain.VoucherLine:
    """Convert SQLAlchemy VoucherLine model to domain VoucherLine entity."""
    return domain.VoucherLine(
        subject_code=orm_line.subject_code,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
        summary=orm_line.summary or "",
        auxiliary_key=orm_line.auxiliary_key,
    )


def voucher_to_domain(orm_voucher: ORMVoucher) -> domain.Voucher:
    """Convert SQLAlchemy Voucher model (with lines) to domain Voucher entity."""
    return domain.Voucher(
        id=orm_voucher.id,
        code=orm_voucher.code,
        date=orm_voucher.date,
        status=domain.VoucherStatus(orm_voucher.status),
        lines=tuple(voucher_line_to_domain(line) for line in orm_voucher.lines),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        kind=domain.CategoryKind(orm_category.kind),
    )


def fund_account_to_domain(orm_account: ORMFundAccount) -> domain.FundAccount:
    """Convert SQLAlchemy FundAccount model to domain FundAccount entity."""
    return domain.FundAccount(
        id=orm_account.id,
        name=orm_account.name,
        related_subject_code=orm_account.related_subject_code,
        opening_date=orm_account.opening_date,
        opening_balance=_money(orm_account.opening_balance),
        related_auxiliary_key=orm_account.related_auxiliary_key,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        fund_account_id=orm_entry.fund_account_id,
        income=_money(orm_entry.income),
        expense=_money(orm_entry.expense),
        category_id=orm_entry.category_id,
        linked_voucher_code=orm_entry.linked_voucher_code,
        summary=orm_entry.summary or "",
        is_internal_transfer=orm_entry.is_internal_transfer,
    )


def initial_balance_to_domain(orm_balance: ORMInitialBalance) -> domain.InitialBalance:
    """Convert SQLAlchemy InitialBalance model to domain InitialBalance entity."""
    return domain.InitialBalance(
        subject_code=orm_balance.subject_code,
        opening_balance=_money(orm_balance.opening_balance),
        year_to_date_debit=_money(orm_balance.year_to_date_debit),
        year_to_date_credit=_money(orm_balance.year_to_date_credit),
        auxiliary_key=orm_balance.auxiliary_key,
        effective_date=orm_balance.effective_date,
    )
