"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid pulling report services through domain/__init__.py
from ledgerkit.domain.entities import (
    AuxiliaryItem,
    Category,
    CategoryKind,
    Direction,
    FundAccount,
    InitialBalance,
    JournalEntry,
    Subject,
    Voucher,
    VoucherLine,
    VoucherStatus,
)
from ledgerkit.domain.money import Money


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Exposes the book's collections to the ledger engine. Records are created
    and listed; editing and deleting them belongs to the bookkeeping
    front-end.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Subject operations
    @abstractmethod
    def create_subject(
        self,
        code: str,
        name: str,
        direction: Optional[Direction],
        parent_id: Optional[int] = None,
        is_active: bool = True,
    ) -> int:
        """Create a subject. Returns subject ID."""
        pass

    @abstractmethod
    def get_subject_by_code(self, code: str) -> Optional[Subject]:
        """Get subject by code."""
        pass

    @abstractmethod
    def list_subjects(self) -> list[Subject]:
        """List all subjects ordered by code."""
        pass

    # Auxiliary item operations
    @abstractmethod
    def create_auxiliary_item(self, key: str, name: str, category: Optional[str] = None) -> int:
        """Create an auxiliary item. Returns item ID."""
        pass

    @abstractmethod
    def list_auxiliary_items(self) -> list[AuxiliaryItem]:
        """List all auxiliary items."""
        pass

    # Voucher operations
    @abstractmethod
    def create_voucher(
        self,
        code: str,
        date: date,
        status: VoucherStatus,
        lines: Sequence[VoucherLine],
    ) -> int:
        """Create a voucher with its lines. Returns voucher ID."""
        pass

    @abstractmethod
    def list_vouchers(
        self,
        status: Optional[VoucherStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Voucher]:
        """List vouchers with lines, ordered by date then code."""
        pass

    @abstractmethod
    def get_voucher_statuses(self) -> dict[str, VoucherStatus]:
        """Status of every voucher code in the book."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, kind: CategoryKind) -> int:
        """Create an income/expense category. Returns category ID."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List categories in creation order."""
        pass

    # Fund account operations
    @abstractmethod
    def create_fund_account(
        self,
        name: str,
        related_subject_code: str,
        opening_date: date,
        opening_balance: Money,
        related_auxiliary_key: Optional[str] = None,
    ) -> int:
        """Create a fund account. Returns fund account ID."""
        pass

    @abstractmethod
    def get_fund_account_by_name(self, name: str) -> Optional[FundAccount]:
        """Get fund account by name."""
        pass

    @abstractmethod
    def list_fund_accounts(self) -> list[FundAccount]:
        """List fund accounts in creation order."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(
        self,
        date: date,
        fund_account_id: int,
        income: Money,
        expense: Money,
        category_id: Optional[int] = None,
        linked_voucher_code: Optional[str] = None,
        summary: str = "",
        is_internal_transfer: bool = False,
    ) -> int:
        """Create a cash-journal entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        fund_account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntry]:
        """List journal entries in entry order (date, then ID)."""
        pass

    # Initial balance operations
    @abstractmethod
    def set_initial_balance(
        self,
        subject_code: str,
        opening_balance: Money,
        year_to_date_debit: Money,
        year_to_date_credit: Money,
        auxiliary_key: Optional[str] = None,
        effective_date: Optional[date] = None,
    ) -> int:
        """Create or replace the setup balance of a subject (+ auxiliary item)."""
        pass

    @abstractmethod
    def list_initial_balances(self) -> list[InitialBalance]:
        """List all setup balances."""
        pass
