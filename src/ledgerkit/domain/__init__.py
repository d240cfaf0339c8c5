"""Domain layer for ledgerkit.

The ledger engine lives in the submodules here and works on plain entities.
``ReportService`` (in ``ledgerkit.domain.reports``) wires it to a database.
"""

from ledgerkit.domain.money import DEFAULT_SCALE, Money
from ledgerkit.domain.hierarchy import SubjectHierarchy, SubjectNode
from ledgerkit.domain.balance import compute_balance
from ledgerkit.domain.ledger import LedgerScope, LedgerSortKey

__all__ = [
    "DEFAULT_SCALE",
    "Money",
    "SubjectHierarchy",
    "SubjectNode",
    "compute_balance",
    "LedgerScope",
    "LedgerSortKey",
]
