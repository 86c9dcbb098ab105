"""Analytics engine - aggregate financial-health metrics from classified transactions"""

import statistics
from collections import defaultdict
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence, Tuple

from statement_scoring.domain.models import (
    AnalysisResult,
    DateRange,
    MonthlyBucket,
    RecurringPattern,
    Transaction,
    TransactionKind,
)
from statement_scoring.utils.date_utils import month_key, parse_statement_date

DAYS_PER_MONTH = 30
DEBT_KEYWORDS = ("loan", "emi", "credit card", "debt", "repayment", "installment")
REGULAR_BILLS_SCORE = 100
IRREGULAR_BILLS_SCORE = 50


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population stddev over mean; a zero mean is treated as 1"""
    mean = statistics.fmean(values)
    return statistics.pstdev(values) / (mean or 1)


def build_date_range(transactions: Sequence[Transaction], now: datetime | None = None) -> DateRange:
    """
    Span of parseable transaction dates.

    Falls back to a one-day range at `now` when nothing parses; this is the
    only point where wall-clock time can enter an analysis.
    """
    dates = [d for d in (parse_statement_date(t.date) for t in transactions) if d is not None]
    if dates:
        start, end = min(dates), max(dates)
    else:
        start = end = (now or datetime.now()).date()
    return DateRange(start=start, end=end, days=max(1, (end - start).days))


def build_monthly_buckets(transactions: Sequence[Transaction]) -> List[MonthlyBucket]:
    """Group by calendar month; transactions with unparseable dates are skipped"""
    grouped: Dict[str, List] = defaultdict(lambda: [Decimal(0), Decimal(0), 0])
    for txn in transactions:
        day = parse_statement_date(txn.date)
        if day is None:
            continue
        bucket = grouped[month_key(day)]
        if txn.kind is TransactionKind.INCOME:
            bucket[0] += txn.amount
        else:
            bucket[1] += txn.amount
        bucket[2] += 1

    return [
        MonthlyBucket(month_key=key, income=income, expense=expense, transaction_count=count)
        for key, (income, expense, count) in sorted(grouped.items())
    ]


def detect_recurring_payments(transactions: Sequence[Transaction]) -> List[RecurringPattern]:
    """Same case-folded description and rounded amount seen at least twice"""
    groups: Dict[Tuple[str, int], List[Transaction]] = defaultdict(list)
    for txn in transactions:
        rounded = int(txn.amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        groups[(txn.description.casefold(), rounded)].append(txn)

    patterns = [
        RecurringPattern(
            description=min(t.description for t in members),
            amount=rounded,
            occurrence_count=len(members),
            dates=tuple(sorted(t.date for t in members if t.date)),
        )
        for (_, rounded), members in sorted(groups.items())
        if len(members) >= 2
    ]
    return patterns


def income_consistency_score(buckets: Sequence[MonthlyBucket]) -> float:
    incomes = [float(b.income) for b in buckets if b.income > 0]
    if not incomes:
        return 0.0
    return clamp((1 - coefficient_of_variation(incomes)) * 100)


def spending_volatility_score(buckets: Sequence[MonthlyBucket]) -> float:
    """Inverted volatility: higher means steadier spending"""
    expenses = [float(b.expense) for b in buckets if b.expense > 0]
    volatility = coefficient_of_variation(expenses) * 100 if expenses else 0.0
    return clamp(100 - volatility)


def total_debt_obligations(transactions: Sequence[Transaction]) -> Decimal:
    return sum(
        (t.amount for t in transactions if any(k in t.description.casefold() for k in DEBT_KEYWORDS)),
        Decimal(0),
    )


def analyze(transactions: Sequence[Transaction], now: datetime | None = None) -> AnalysisResult:
    """
    Compute the aggregate snapshot for a classified transaction list.

    Metrics:
    - totals by kind, signed savings
    - continuous month span (days / 30, at least 1) and per-month averages
    - income consistency and spending volatility scores from monthly buckets
    - emergency buffer, recurring payments, debt obligations

    Never raises for degenerate input; an empty list yields zeroed metrics.
    """
    total_income = sum((t.amount for t in transactions if t.kind is TransactionKind.INCOME), Decimal(0))
    total_expenses = sum((t.amount for t in transactions if t.kind is TransactionKind.EXPENSE), Decimal(0))
    savings = total_income - total_expenses

    date_range = build_date_range(transactions, now)
    months_span = max(1.0, date_range.days / DAYS_PER_MONTH)

    average_monthly_income = float(total_income) / months_span
    average_monthly_expenses = float(total_expenses) / months_span
    savings_per_month = average_monthly_income - average_monthly_expenses
    savings_rate = (savings_per_month / average_monthly_income) * 100 if average_monthly_income > 0 else 0.0

    buckets = build_monthly_buckets(transactions)
    emergency_buffer = float(savings) / average_monthly_expenses if average_monthly_expenses > 0 else 0.0

    recurring = detect_recurring_payments(transactions)
    debt_total = total_debt_obligations(transactions)

    return AnalysisResult(
        total_income=total_income,
        total_expenses=total_expenses,
        savings=savings,
        average_monthly_income=average_monthly_income,
        average_monthly_expenses=average_monthly_expenses,
        savings_per_month=savings_per_month,
        savings_rate=savings_rate,
        income_consistency_score=income_consistency_score(buckets),
        spending_volatility_score=spending_volatility_score(buckets),
        emergency_savings_buffer=emergency_buffer,
        bill_payment_regularity=REGULAR_BILLS_SCORE if recurring else IRREGULAR_BILLS_SCORE,
        account_age_months=months_span,
        monthly_debt_obligations=float(debt_total) / months_span,
        total_debt_obligations=debt_total,
        months_span=months_span,
        date_range=date_range,
        transaction_count=len(transactions),
        monthly_buckets=tuple(buckets),
        recurring_patterns=tuple(recurring),
        transactions=tuple(transactions),
    )
