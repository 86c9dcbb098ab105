"""Domain models - pure Python dataclasses representing statement data and decisions"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple

# Structured rows keyed by case-folded header name
RawRecord = Dict[str, str]


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class RiskTier(str, Enum):
    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class NormalizedRow:
    """Canonical per-transaction tuple resolved from a raw record"""

    date: str
    description: str
    amount: Decimal  # signed as found in the source
    declared_type: str = ""  # canonical token, e.g. "credit" / "debit"


@dataclass(frozen=True)
class Transaction:
    """Classified statement transaction; sign lives in kind only"""

    date: str
    description: str
    amount: Decimal
    kind: TransactionKind

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative, got {self.amount}")


@dataclass(frozen=True)
class MonthlyBucket:
    month_key: str  # YYYY-MM
    income: Decimal
    expense: Decimal
    transaction_count: int

    @property
    def savings(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class RecurringPattern:
    description: str
    amount: int  # rounded
    occurrence_count: int
    dates: Tuple[str, ...]


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date
    days: int


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate financial snapshot of one uploaded statement"""

    total_income: Decimal
    total_expenses: Decimal
    savings: Decimal
    average_monthly_income: float
    average_monthly_expenses: float
    savings_per_month: float
    savings_rate: float
    income_consistency_score: float
    spending_volatility_score: float
    emergency_savings_buffer: float
    bill_payment_regularity: int
    account_age_months: float
    monthly_debt_obligations: float
    total_debt_obligations: Decimal
    months_span: float
    date_range: DateRange
    transaction_count: int
    monthly_buckets: Tuple[MonthlyBucket, ...] = ()
    recurring_patterns: Tuple[RecurringPattern, ...] = ()
    transactions: Tuple[Transaction, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class EligibilityMetrics:
    """Metrics snapshot the decision was based on"""

    savings_rate: float
    income_consistency_score: float
    spending_volatility_score: float
    emergency_savings_buffer: float
    bill_payment_regularity: int
    account_age_months: float
    monthly_debt_obligations: float


@dataclass(frozen=True)
class EligibilityResult:
    """Output of the eligibility scorer"""

    eligible: bool
    score: int
    risk_tier: RiskTier
    strengths: Tuple[str, ...]
    warnings: Tuple[str, ...]
    reasons: Tuple[str, ...]
    recommended_amount: int
    max_amount: int
    metrics: EligibilityMetrics
