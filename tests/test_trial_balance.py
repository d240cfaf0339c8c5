"""Tests for trial balance validation."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from ledgerkit.domain.entities import Direction, Subject
from ledgerkit.domain.errors import (
    InvalidSubjectConfiguration,
    UnbalancedInput,
    UnknownSubjectReference,
    ValidationError,
)
from ledgerkit.domain.hierarchy import SubjectHierarchy
from ledgerkit.domain.money import Money
from ledgerkit.domain.trial_balance import assert_balanced, validate


def _m(text):
    return Money.from_decimal_string(text)


@pytest.fixture
def chart():
    return [
        Subject(1, "1001", "Cash", Direction.DEBIT),
        Subject(2, "1002", "Bank Deposits", Direction.DEBIT),
        Subject(3, "100201", "Bank A", Direction.DEBIT),
        Subject(4, "100202", "Bank B", Direction.DEBIT),
        Subject(5, "2001", "Short-term Loans", Direction.CREDIT),
        Subject(6, "4001", "Paid-in Capital", Direction.CREDIT),
    ]


def test_two_subjects_balance():
    subjects = [
        Subject(1, "1001", "Cash", Direction.DEBIT),
        Subject(2, "2001", "Loans", Direction.CREDIT),
    ]
    result = validate(subjects, {1: _m("500.00"), 2: _m("500.00")})
    assert result.is_balanced is True
    assert result.diff == Money.zero()
    assert result.debit_total == result.credit_total == _m("500.00")


def test_roll_up_sums_children(chart):
    leaf_balances = {1: _m("100.00"), 3: _m("250.00"), 4: _m("150.00"), 5: _m("300.00"), 6: _m("200.00")}
    result = validate(chart, leaf_balances)

    assert result.rolled_up[2] == _m("400.00")
    assert result.debit_total == _m("500.00")
    assert result.credit_total == _m("500.00")
    assert result.is_balanced

    hierarchy = SubjectHierarchy.resolve(chart)
    for node in hierarchy.nodes:
        if not node.is_leaf:
            children = [hierarchy.nodes[i].subject.id for i in node.children]
            assert result.rolled_up[node.subject.id] == Money.sum(result.rolled_up[c] for c in children)


def test_missing_leaves_count_as_zero(chart):
    result = validate(chart, {1: _m("10.00")})
    assert result.rolled_up[3] == Money.zero()
    assert result.debit_total == _m("10.00")
    assert result.credit_total == Money.zero()


def test_unbalanced_result_is_returned_with_diff(chart):
    result = validate(chart, {1: _m("100.00"), 5: _m("99.99")})
    assert result.is_balanced is False
    assert result.diff == _m("0.01")


def test_assert_balanced_raises_with_diff(chart):
    result = validate(chart, {1: _m("100.00"), 5: _m("99.99")})
    with pytest.raises(UnbalancedInput) as excinfo:
        assert_balanced(result)
    assert excinfo.value.diff == _m("0.01")
    assert "0.01" in str(excinfo.value)

    balanced = validate(chart, {1: _m("1.00"), 5: _m("1.00")})
    assert assert_balanced(balanced) is balanced


def test_tolerance_is_explicit_minor_units(chart):
    leaf_balances = {1: _m("100.00"), 5: _m("99.99")}
    assert validate(chart, leaf_balances, tolerance=Money(1)).is_balanced
    assert not validate(chart, leaf_balances, tolerance=Money(0)).is_balanced
    with pytest.raises(ValidationError):
        validate(chart, leaf_balances, tolerance=Money(-1))


def test_balance_for_non_leaf_is_rejected(chart):
    with pytest.raises(InvalidSubjectConfiguration):
        validate(chart, {2: _m("1.00")})


def test_balance_for_unknown_subject_is_rejected(chart):
    with pytest.raises(UnknownSubjectReference):
        validate(chart, {99: _m("1.00")})


def test_root_without_direction_fails():
    subjects = [Subject(1, "1001", "Cash", None)]
    with pytest.raises(InvalidSubjectConfiguration):
        validate(subjects, {1: _m("1.00")})


def test_accepts_resolved_hierarchy(chart):
    hierarchy = SubjectHierarchy.resolve(chart)
    balances = {1: _m("3.00"), 6: _m("3.00")}
    assert validate(hierarchy, balances) == validate(chart, balances)


def test_concurrent_calls_do_not_share_state(chart):
    inputs = [{1: Money(i), 5: Money(i if i % 2 else i + 1)} for i in range(40)]
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(lambda balances: validate(chart, balances), inputs))
    assert [r.is_balanced for r in results] == [i % 2 == 1 for i in range(40)]
    assert [r.rolled_up[1] for r in results] == [Money(i) for i in range(40)]
