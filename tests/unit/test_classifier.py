"""Unit tests for income/expense classification"""

from decimal import Decimal

import pytest

from statement_scoring.domain.classifier import (
    build_classifier_chain,
    classify,
    classify_rows,
    classify_with_rule,
    keyword_kind,
    to_normalized,
)
from statement_scoring.domain.models import NormalizedRow, Transaction, TransactionKind
from statement_scoring.domain.policy import ClassifierPolicy


def row(description: str, amount, declared_type: str = "") -> NormalizedRow:
    return NormalizedRow(
        date="2024-01-05",
        description=description,
        amount=Decimal(str(amount)),
        declared_type=declared_type,
    )


def test_declared_type_wins_over_keywords():
    """Test an explicit debit overrides income wording"""
    transaction, rule = classify_with_rule(row("Salary", 5000, "debit"))

    assert rule == "declared_type"
    assert transaction.kind == TransactionKind.EXPENSE


def test_declared_credit_is_income():
    transaction, rule = classify_with_rule(row("Transfer", -300, "credit"))

    assert rule == "declared_type"
    assert transaction.kind == TransactionKind.INCOME
    assert transaction.amount == Decimal("300")


@pytest.mark.parametrize(
    "description,kind",
    [
        ("ATM withdrawal", TransactionKind.EXPENSE),
        ("Card purchase at grocer", TransactionKind.EXPENSE),
        ("Monthly service FEE", TransactionKind.EXPENSE),
        ("Salary deposit", TransactionKind.INCOME),
        ("Interest paid", TransactionKind.INCOME),
    ],
)
def test_keyword_rule(description, kind):
    """Test keyword families decide when no type is declared"""
    transaction, rule = classify_with_rule(row(description, 100))

    assert rule == "keywords"
    assert transaction.kind == kind


def test_keyword_tie_goes_to_expense_by_default():
    """Test wording matching both families is treated as an outflow"""
    # "credit" is an income keyword, "payment" an expense keyword
    assert keyword_kind("Credit card payment") == TransactionKind.EXPENSE


def test_keyword_tie_policy_is_tunable():
    policy = ClassifierPolicy(expense_wins_ties=False)
    assert keyword_kind("Credit card payment", policy) == TransactionKind.INCOME


def test_free_text_type_falls_through_to_keywords():
    """Test a non-canonical type token is matched as text"""
    transaction, rule = classify_with_rule(row("Rent", -1000, "online payment"))

    assert rule == "keywords"
    assert transaction.kind == TransactionKind.EXPENSE


@pytest.mark.parametrize("amount,kind", [(-20, TransactionKind.EXPENSE), (20, TransactionKind.INCOME)])
def test_amount_sign_rule(amount, kind):
    """Test the sign decides when nothing else matches"""
    transaction, rule = classify_with_rule(row("Misc", amount, "transfer"))

    assert rule == "amount_sign"
    assert transaction.kind == kind
    assert transaction.amount == Decimal(20)


def test_classified_amounts_are_non_negative():
    rows = [row("Misc", -5), row("Refund", 7), row("ATM withdrawal", "-12.50", "debit")]

    assert all(t.amount >= 0 for t in classify_rows(rows))


def test_transaction_rejects_negative_amount():
    with pytest.raises(ValueError):
        Transaction(date="2024-01-05", description="Bad", amount=Decimal("-1"), kind=TransactionKind.INCOME)


@pytest.mark.parametrize(
    "source",
    [
        row("Credit card payment", 250),
        row("Misc", -20),
        row("Salary", 5000, "debit"),
        row("Interest", 3),
    ],
)
def test_classification_is_idempotent(source):
    """Test re-classifying a classified transaction keeps its kind"""
    transaction = classify(source)
    assert classify(to_normalized(transaction)).kind == transaction.kind


def test_classifier_chain_order():
    chain = build_classifier_chain(ClassifierPolicy())
    assert chain.names == ("declared_type", "keywords", "amount_sign")
