"""Fund account and income/expense category summaries over the cash journal."""

from concurrent.futures import Executor
from typing import Optional, Sequence

from ledgerkit.domain.balance import compute_balance, journal_movements
from ledgerkit.domain.entities import (
    AccountSummary,
    Category,
    CategoryKind,
    CategorySummary,
    DateRange,
    Direction,
    FundAccount,
    FundSummary,
    JournalEntry,
)
from ledgerkit.domain.errors import (
    UnknownCategoryReference,
    UnknownFundAccountReference,
    category_not_found,
    fund_account_not_found,
)
from ledgerkit.domain.money import Money

UNCATEGORIZED_NAME = "Uncategorized"


def check_references(
    fund_accounts: Sequence[FundAccount],
    journal_entries: Sequence[JournalEntry],
    categories: Optional[Sequence[Category]] = None,
) -> None:
    """Fail on entries naming accounts (or categories) that were not supplied."""
    account_ids = {account.id for account in fund_accounts}
    category_ids = None if categories is None else {category.id for category in categories}
    for entry in journal_entries:
        if entry.fund_account_id not in account_ids:
            raise UnknownFundAccountReference(fund_account_not_found(entry.fund_account_id))
        if (
            category_ids is not None
            and entry.category_id is not None
            and entry.category_id not in category_ids
        ):
            raise UnknownCategoryReference(category_not_found(entry.category_id))


def account_summary(
    account: FundAccount,
    journal_entries: Sequence[JournalEntry],
    date_range: DateRange,
) -> AccountSummary:
    """Opening, income, expense and closing for one fund account.

    The opening balance holds as of the account's opening date, so earlier
    entries are ignored.
    """
    movements = journal_movements(journal_entries, account.id, since=account.opening_date)
    window = compute_balance(movements, Direction.DEBIT, account.opening_balance, date_range)
    return AccountSummary(
        fund_account_id=account.id,
        name=account.name,
        opening=window.opening,
        income=window.debit_total,
        expense=window.credit_total,
        closing=window.closing,
    )


def category_summaries(
    fund_accounts: Sequence[FundAccount],
    journal_entries: Sequence[JournalEntry],
    categories: Sequence[Category],
    date_range: DateRange,
) -> tuple[CategorySummary, ...]:
    """Per-category income and expense within the range.

    Internal transfers are left out. Categories follow the order of
    ``categories``; entries without a category go to a final
    "Uncategorized" bucket that is emitted whenever it has entries.
    """
    opening_dates = {account.id: account.opening_date for account in fund_accounts}
    scale = fund_accounts[0].opening_balance.scale if fund_accounts else Money.zero().scale
    zero = Money.zero(scale)

    totals: dict[Optional[int], list] = {}
    for entry in journal_entries:
        if entry.is_internal_transfer or not date_range.contains(entry.date):
            continue
        if entry.date < opening_dates[entry.fund_account_id]:
            continue
        bucket = totals.setdefault(entry.category_id, [zero, zero, 0])
        bucket[0] += entry.income
        bucket[1] += entry.expense
        bucket[2] += 1

    results = []
    for category in categories:
        if category.id in totals:
            income, expense, count = totals[category.id]
            results.append(
                CategorySummary(
                    category_id=category.id,
                    name=category.name,
                    kind=category.kind,
                    income=income,
                    expense=expense,
                    count=count,
                )
            )
    if None in totals:
        income, expense, count = totals[None]
        results.append(
            CategorySummary(
                category_id=None,
                name=UNCATEGORIZED_NAME,
                kind=CategoryKind.UNCATEGORIZED,
                income=income,
                expense=expense,
                count=count,
            )
        )
    return tuple(results)


def summarize(
    fund_accounts: Sequence[FundAccount],
    journal_entries: Sequence[JournalEntry],
    categories: Sequence[Category],
    date_range: DateRange,
    executor: Optional[Executor] = None,
) -> FundSummary:
    """Fund summary by account and by category.

    Args:
        fund_accounts: Accounts to report, in output order
        journal_entries: Cash-journal entries for those accounts
        categories: Income/expense categories, in output order
        date_range: Reporting window
        executor: Optional executor to compute accounts in parallel; rows
            keep the order of ``fund_accounts``

    Raises:
        UnknownFundAccountReference: If an entry names an account not supplied
        UnknownCategoryReference: If an entry names a category not supplied
    """
    fund_accounts = list(fund_accounts)
    journal_entries = list(journal_entries)
    check_references(fund_accounts, journal_entries, categories)

    def summarize_account(account: FundAccount) -> AccountSummary:
        return account_summary(account, journal_entries, date_range)

    mapper = executor.map if executor is not None else map
    by_account = tuple(mapper(summarize_account, fund_accounts))
    by_category = category_summaries(fund_accounts, journal_entries, categories, date_range)
    return FundSummary(by_account=by_account, by_category=by_category)
