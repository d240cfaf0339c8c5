"""Trial balance validation over the subject hierarchy."""

from typing import Iterable, Mapping, Optional, Union

from ledgerkit.domain.balance import require_direction
from ledgerkit.domain.entities import Direction, Subject, TrialBalanceResult
from ledgerkit.domain.errors import (
    InvalidSubjectConfiguration,
    UnbalancedInput,
    ValidationError,
    trial_balance_unbalanced,
)
from ledgerkit.domain.hierarchy import SubjectHierarchy, SubjectNode
from ledgerkit.domain.money import DEFAULT_SCALE, Money


def _scale_of(leaf_balances: Mapping[int, Money], tolerance: Optional[Money]) -> int:
    for value in leaf_balances.values():
        return value.scale
    if tolerance is not None:
        return tolerance.scale
    return DEFAULT_SCALE


def validate(
    subjects: Union[SubjectHierarchy, Iterable[Subject]],
    leaf_balances: Mapping[int, Money],
    tolerance: Optional[Money] = None,
) -> TrialBalanceResult:
    """Roll leaf balances up the hierarchy and compare root debits with credits.

    Args:
        subjects: Resolved hierarchy or a flat subject list
        leaf_balances: Balance per leaf subject id, in that subject's direction;
            missing leaves count as zero. A leaf's balance covers any
            inactive subjects filed under it, which are not visited again
        tolerance: Largest absolute difference still treated as balanced
            (exact comparison when omitted)

    Returns:
        TrialBalanceResult; an unbalanced result is returned, not raised

    Raises:
        UnknownSubjectReference: If a balance is given for an unknown subject id
        InvalidSubjectConfiguration: If a balance is given for a non-leaf
            subject or a root subject has no direction
    """
    hierarchy = subjects if isinstance(subjects, SubjectHierarchy) else SubjectHierarchy.resolve(subjects)
    scale = _scale_of(leaf_balances, tolerance)
    zero = Money.zero(scale)
    if tolerance is None:
        tolerance = zero
    if tolerance.is_negative():
        raise ValidationError("Trial balance tolerance cannot be negative")

    for subject_id in leaf_balances:
        node = hierarchy.node_by_id(subject_id)
        if not node.is_leaf:
            raise InvalidSubjectConfiguration(
                f"Balance supplied for non-leaf subject '{node.code}'"
            )

    # Local to this call; never shared between invocations
    memo: dict[int, Money] = {}

    def roll_up(node: SubjectNode) -> Money:
        if node.index in memo:
            return memo[node.index]
        if node.is_leaf:
            value = leaf_balances.get(node.subject.id, zero)
        else:
            value = Money.sum((roll_up(hierarchy.nodes[i]) for i in node.children), scale)
        memo[node.index] = value
        return value

    debit_total = zero
    credit_total = zero
    for root in hierarchy.roots:
        if not root.is_active and root.subject.id not in leaf_balances:
            continue
        direction = require_direction(root.subject.normal_direction, root.code)
        if direction is Direction.DEBIT:
            debit_total += roll_up(root)
        else:
            credit_total += roll_up(root)

    rolled_up = {node.subject.id: roll_up(node) for node in hierarchy.nodes}
    diff = debit_total - credit_total

    return TrialBalanceResult(
        rolled_up=rolled_up,
        debit_total=debit_total,
        credit_total=credit_total,
        is_balanced=diff.abs() <= tolerance,
        diff=diff,
        tolerance=tolerance,
    )


def assert_balanced(result: TrialBalanceResult) -> TrialBalanceResult:
    """Return ``result`` if balanced, else raise UnbalancedInput carrying the diff."""
    if not result.is_balanced:
        raise UnbalancedInput(
            trial_balance_unbalanced(
                result.debit_total.to_decimal_string(),
                result.credit_total.to_decimal_string(),
                result.diff.to_decimal_string(),
            ),
            diff=result.diff,
        )
    return result
