"""Tunable classification and risk-policy constants"""

from dataclasses import dataclass
from typing import Tuple

from statement_scoring.config import Settings, settings


@dataclass(frozen=True)
class ClassifierPolicy:
    """Keyword families used by the classifier and the image-text extractor"""

    expense_keywords: Tuple[str, ...] = (
        "purchase", "check", "withdrawal", "charge", "debit", "payment", "fee",
    )
    income_keywords: Tuple[str, ...] = (
        "credit", "deposit", "interest", "salary", "income", "preauthorized",
    )
    # Debt-like wording is treated as an outflow when both families match
    expense_wins_ties: bool = True


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Point weights and thresholds of the eligibility model.

    Defaults reproduce the production policy:
    - 30 (+5) income vs expenses, 25 savings, 15 savings rate
    - 10 consistency, 10 volatility, 10 buffer, 5 bills, 5 account age
    - debt penalty of up to -15
    """

    savings_threshold: float = 10_000.0
    loan_cap: float = 100_000.0
    loan_savings_multiple: float = 3.0
    min_eligible_score: int = 60
    min_savings_rate: float = 5.0
    currency_symbol: str = "₹"

    # 1. Income vs expenses
    income_exceeds_points: int = 30
    low_expense_ratio_points: int = 5
    low_expense_ratio_pct: float = 70.0
    high_expense_ratio_pct: float = 90.0

    # 2. Monthly savings
    savings_above_threshold_points: int = 25
    savings_positive_points: int = 10

    # 3. Savings rate (%)
    high_savings_rate_pct: float = 20.0
    high_savings_rate_points: int = 15
    moderate_savings_rate_pct: float = 10.0
    moderate_savings_rate_points: int = 10
    low_savings_rate_points: int = 5

    # 4. Income consistency
    very_consistent_income: float = 80.0
    very_consistent_income_points: int = 10
    consistent_income: float = 60.0
    consistent_income_points: int = 7
    irregular_income: float = 40.0
    irregular_income_points: int = 4

    # 5. Spending volatility (inverted score)
    stable_spending: float = 80.0
    stable_spending_points: int = 10
    moderate_spending: float = 60.0
    moderate_spending_points: int = 7

    # 6. Emergency buffer (months)
    strong_buffer_months: float = 6.0
    strong_buffer_points: int = 10
    adequate_buffer_months: float = 3.0
    adequate_buffer_points: int = 7
    low_buffer_points: int = 4

    # 7. Bill regularity
    regular_bills_threshold: float = 80.0
    regular_bills_points: int = 5
    irregular_bills_points: int = 2

    # 8. Account age (months)
    long_history_months: float = 12.0
    long_history_points: int = 5
    moderate_history_months: float = 6.0
    moderate_history_points: int = 3

    # 9. Debt penalty (% of monthly income)
    high_debt_ratio_pct: float = 40.0
    high_debt_penalty: int = 15
    moderate_debt_ratio_pct: float = 20.0
    moderate_debt_penalty: int = 8

    # Risk tiers: score below bound -> tier
    high_risk_below: int = 40
    medium_risk_below: int = 60
    low_risk_below: int = 80

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "ScoringPolicy":
        config = config or settings
        return cls(
            savings_threshold=config.savings_threshold,
            loan_cap=config.loan_cap,
            min_eligible_score=config.min_eligible_score,
            min_savings_rate=config.min_savings_rate,
            currency_symbol=config.currency_symbol,
        )


DEFAULT_CLASSIFIER_POLICY = ClassifierPolicy()
