"""Report domain service over a stored book."""

from concurrent.futures import Executor
from dataclasses import replace
from datetime import date
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain import (
    fund_summary,
    ledger,
    reconciliation,
    subject_balance,
    trial_balance,
)
from ledgerkit.domain.balance import combine_initial_balances, voucher_movements
from ledgerkit.domain.entities import (
    DateRange,
    DiffDetails,
    Direction,
    FundAccount,
    FundSummary,
    LedgerReport,
    ReconciliationMapping,
    ReconciliationRow,
    SubjectBalanceRow,
    TrialBalanceResult,
    Voucher,
    VoucherStatus,
)
from ledgerkit.domain.errors import (
    UnknownAuxiliaryReference,
    UnknownFundAccountReference,
    ValidationError,
    auxiliary_item_not_found,
    fund_account_not_found,
)
from ledgerkit.domain.hierarchy import SubjectHierarchy
from ledgerkit.domain.ledger import LedgerScope, LedgerSortKey
from ledgerkit.domain.money import Money


class ReportService:
    """Service that loads book data and runs the ledger engine over it.

    Only approved vouchers are passed on to the engine.
    """

    def __init__(self, db: Database, fiscal_year_start_month: int = 1):
        """Initialize report service.

        Args:
            db: Database instance
            fiscal_year_start_month: First month of the fiscal year (1-12)
        """
        if not 1 <= fiscal_year_start_month <= 12:
            raise ValidationError(
                f"Fiscal year start month must be between 1 and 12, got {fiscal_year_start_month}"
            )
        self.db = db
        self.fiscal_year_start_month = fiscal_year_start_month

    def get_hierarchy(self) -> SubjectHierarchy:
        """Resolve the book's chart of accounts."""
        return SubjectHierarchy.resolve(self.db.list_subjects())

    def get_approved_vouchers(self, end_date: Optional[date] = None) -> list[Voucher]:
        """Approved vouchers, optionally only those dated on or before ``end_date``."""
        return self.db.list_vouchers(status=VoucherStatus.APPROVED, end_date=end_date)

    def subject_balance(
        self,
        date_range: DateRange,
        code_from: Optional[str] = None,
        code_to: Optional[str] = None,
        level_from: Optional[int] = None,
        level_to: Optional[int] = None,
    ) -> tuple[SubjectBalanceRow, ...]:
        """Subject balance report for the range.

        Args:
            date_range: Reporting window
            code_from: Optional lowest subject code
            code_to: Optional highest subject code
            level_from: Optional shallowest level (roots are level 1)
            level_to: Optional deepest level

        Returns:
            One row per selected subject, in code order
        """
        return subject_balance.subject_balances(
            self.get_hierarchy(),
            self.get_approved_vouchers(end_date=date_range.end),
            self.db.list_initial_balances(),
            date_range,
            fiscal_year_start_month=self.fiscal_year_start_month,
            code_from=code_from,
            code_to=code_to,
            level_from=level_from,
            level_to=level_to,
        )

    def detailed_ledger(
        self,
        subject_code: str,
        date_range: DateRange,
        auxiliary_key: Optional[str] = None,
        sort_key: LedgerSortKey = LedgerSortKey.DATE,
    ) -> LedgerReport:
        """Detailed ledger page for one subject, or one subject + auxiliary item.

        Raises:
            UnknownSubjectReference: If the subject is not in the chart
            UnknownAuxiliaryReference: If the auxiliary item is not on file
        """
        node = self.get_hierarchy().node(subject_code)
        if auxiliary_key is None:
            scope = LedgerScope.subject(subject_code)
        else:
            if auxiliary_key not in {item.key for item in self.db.list_auxiliary_items()}:
                raise UnknownAuxiliaryReference(auxiliary_item_not_found(auxiliary_key))
            scope = LedgerScope.auxiliary(subject_code, auxiliary_key)
        movements = voucher_movements(
            self.get_approved_vouchers(end_date=date_range.end),
            subject_codes=[subject_code],
            auxiliary_key=auxiliary_key,
        )
        initial = combine_initial_balances(
            self.db.list_initial_balances(), subject_code, auxiliary_key
        )
        return ledger.generate(
            node.subject,
            movements,
            date_range,
            sort_key=sort_key,
            scope=scope,
            initial_balance=initial,
            fiscal_year_start_month=self.fiscal_year_start_month,
        )

    def detailed_ledger_range(
        self,
        date_range: DateRange,
        code_from: str,
        code_to: Optional[str] = None,
        sort_key: LedgerSortKey = LedgerSortKey.DATE,
    ) -> tuple[LedgerReport, ...]:
        """Ledger pages for every leaf subject in ``[code_from, code_to]``."""
        return ledger.generate_range(
            self.get_hierarchy(),
            voucher_movements(self.get_approved_vouchers(end_date=date_range.end)),
            date_range,
            code_from,
            code_to,
            sort_key=sort_key,
            initial_balances=self.db.list_initial_balances(),
            fiscal_year_start_month=self.fiscal_year_start_month,
        )

    def trial_balance(
        self,
        date_range: DateRange,
        tolerance: Optional[Money] = None,
    ) -> TrialBalanceResult:
        """Trial balance over leaf closing balances at the end of the range."""
        hierarchy = self.get_hierarchy()
        rows = subject_balance.subject_balances(
            hierarchy,
            self.get_approved_vouchers(end_date=date_range.end),
            self.db.list_initial_balances(),
            date_range,
            fiscal_year_start_month=self.fiscal_year_start_month,
        )
        leaf_balances = subject_balance.leaf_closing_balances(rows)
        return trial_balance.validate(hierarchy, leaf_balances, tolerance)

    def fund_summary(
        self,
        date_range: DateRange,
        executor: Optional[Executor] = None,
    ) -> FundSummary:
        """Fund summary by account and by category."""
        return fund_summary.summarize(
            self.db.list_fund_accounts(),
            self.db.list_journal_entries(end_date=date_range.end),
            self.db.list_categories(),
            date_range,
            executor=executor,
        )

    def get_fund_account(self, name: str) -> FundAccount:
        """Get fund account by name or raise UnknownFundAccountReference."""
        account = self.db.get_fund_account_by_name(name)
        if account is None:
            raise UnknownFundAccountReference(fund_account_not_found(name))
        return account

    def get_mappings(self, account_name: Optional[str] = None) -> list[ReconciliationMapping]:
        """Reconciliation mappings taken from each fund account's related subject."""
        if account_name is None:
            accounts = self.db.list_fund_accounts()
        else:
            accounts = [self.get_fund_account(account_name)]
        return [ReconciliationMapping.for_account(account) for account in accounts]

    def reconcile(
        self,
        date_range: DateRange,
        account_name: Optional[str] = None,
        direction: Direction = Direction.DEBIT,
        executor: Optional[Executor] = None,
    ) -> tuple[ReconciliationRow, ...]:
        """Reconcile fund accounts against the approved ledger."""
        mappings = [
            replace(mapping, direction=direction) for mapping in self.get_mappings(account_name)
        ]
        return reconciliation.reconcile(
            mappings,
            self.db.list_journal_entries(end_date=date_range.end),
            self.get_approved_vouchers(end_date=date_range.end),
            date_range,
            executor=executor,
        )

    def diff_details(self, account_name: str, date_range: DateRange) -> DiffDetails:
        """Entries of one fund account present on one side only."""
        (mapping,) = self.get_mappings(account_name)
        return reconciliation.diff_details(
            mapping,
            self.db.list_journal_entries(fund_account_id=mapping.fund_account.id),
            self.get_approved_vouchers(),
            date_range,
            voucher_statuses=self.db.get_voucher_statuses(),
        )

