"""Transaction classifier - decide income vs expense for normalized rows"""

from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from statement_scoring.domain.models import NormalizedRow, Transaction, TransactionKind
from statement_scoring.domain.policy import DEFAULT_CLASSIFIER_POLICY, ClassifierPolicy
from statement_scoring.domain.strategies import Strategy, StrategyChain

DECLARED_KINDS = {"credit": TransactionKind.INCOME, "debit": TransactionKind.EXPENSE}


def kind_from_declared_type(row: NormalizedRow) -> Optional[TransactionKind]:
    return DECLARED_KINDS.get(row.declared_type)


def keyword_kind(text: str, policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY) -> Optional[TransactionKind]:
    """Match free text against the expense and income keyword families"""
    text = text.casefold()
    is_expense = any(keyword in text for keyword in policy.expense_keywords)
    is_income = any(keyword in text for keyword in policy.income_keywords)

    if is_expense and is_income:
        return TransactionKind.EXPENSE if policy.expense_wins_ties else TransactionKind.INCOME
    if is_expense:
        return TransactionKind.EXPENSE
    if is_income:
        return TransactionKind.INCOME
    return None


def kind_from_amount_sign(row: NormalizedRow) -> TransactionKind:
    return TransactionKind.EXPENSE if row.amount < 0 else TransactionKind.INCOME


@lru_cache(maxsize=8)
def build_classifier_chain(policy: ClassifierPolicy) -> StrategyChain[NormalizedRow, TransactionKind]:
    """Priority order: declared type, keywords, amount sign"""
    return StrategyChain(
        [
            Strategy("declared_type", kind_from_declared_type),
            Strategy("keywords", lambda row: keyword_kind(f"{row.description} {row.declared_type}", policy)),
            Strategy("amount_sign", kind_from_amount_sign),
        ]
    )


def classify_with_rule(
    row: NormalizedRow,
    policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY,
) -> Tuple[Transaction, str]:
    """Classify a row and report which rule decided it"""
    rule, kind = build_classifier_chain(policy).resolve_named(row)
    transaction = Transaction(
        date=row.date,
        description=row.description,
        amount=abs(row.amount),
        kind=kind,
    )
    return transaction, rule


def classify(row: NormalizedRow, policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY) -> Transaction:
    return classify_with_rule(row, policy)[0]


def classify_rows(
    rows: Iterable[NormalizedRow],
    policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY,
) -> List[Transaction]:
    return [classify(row, policy) for row in rows]


def to_normalized(transaction: Transaction) -> NormalizedRow:
    """Re-express a classified transaction as a row with a declared type"""
    declared = "credit" if transaction.kind is TransactionKind.INCOME else "debit"
    return NormalizedRow(
        date=transaction.date,
        description=transaction.description,
        amount=transaction.amount,
        declared_type=declared,
    )
