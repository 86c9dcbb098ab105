"""Pydantic schemas the host uses to serialize analysis and eligibility results"""

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from statement_scoring.domain.models import AnalysisResult, EligibilityResult


class TransactionSchema(BaseModel):
    date: str
    description: str
    amount: Decimal
    kind: str


class MonthlyBucketSchema(BaseModel):
    """Per-month totals for charting"""

    month: str
    income: Decimal
    expenses: Decimal
    savings: Decimal
    transaction_count: int


class RecurringPatternSchema(BaseModel):
    description: str
    amount: int
    occurrence_count: int
    dates: List[str]


class DateRangeSchema(BaseModel):
    start: date
    end: date
    days: int


class AnalysisResultSchema(BaseModel):
    """Response body for a statement upload"""

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
    transaction_count: int
    date_range: DateRangeSchema
    monthly_breakdown: List[MonthlyBucketSchema]
    recurring_patterns: List[RecurringPatternSchema]
    transactions: List[TransactionSchema]

    @classmethod
    def from_domain(cls, analysis: AnalysisResult) -> "AnalysisResultSchema":
        return cls(
            total_income=analysis.total_income,
            total_expenses=analysis.total_expenses,
            savings=analysis.savings,
            average_monthly_income=analysis.average_monthly_income,
            average_monthly_expenses=analysis.average_monthly_expenses,
            savings_per_month=analysis.savings_per_month,
            savings_rate=analysis.savings_rate,
            income_consistency_score=analysis.income_consistency_score,
            spending_volatility_score=analysis.spending_volatility_score,
            emergency_savings_buffer=analysis.emergency_savings_buffer,
            bill_payment_regularity=analysis.bill_payment_regularity,
            account_age_months=analysis.account_age_months,
            monthly_debt_obligations=analysis.monthly_debt_obligations,
            total_debt_obligations=analysis.total_debt_obligations,
            transaction_count=analysis.transaction_count,
            date_range=DateRangeSchema(
                start=analysis.date_range.start,
                end=analysis.date_range.end,
                days=analysis.date_range.days,
            ),
            monthly_breakdown=[
                MonthlyBucketSchema(
                    month=b.month_key,
                    income=b.income,
                    expenses=b.expense,
                    savings=b.savings,
                    transaction_count=b.transaction_count,
                )
                for b in analysis.monthly_buckets
            ],
            recurring_patterns=[
                RecurringPatternSchema(
                    description=p.description,
                    amount=p.amount,
                    occurrence_count=p.occurrence_count,
                    dates=list(p.dates),
                )
                for p in analysis.recurring_patterns
            ],
            transactions=[
                TransactionSchema(date=t.date, description=t.description, amount=t.amount, kind=t.kind.value)
                for t in analysis.transactions
            ],
        )


class EligibilityMetricsSchema(BaseModel):
    savings_rate: float
    income_consistency_score: float
    spending_volatility_score: float
    emergency_savings_buffer: float
    bill_payment_regularity: int
    account_age_months: float
    monthly_debt_obligations: float


class EligibilityResultSchema(BaseModel):
    """Response body for an eligibility check"""

    eligible: bool
    score: int
    risk_tier: str
    reasons: List[str]
    strengths: List[str]
    warnings: List[str]
    recommended_amount: int
    max_amount: int
    metrics: EligibilityMetricsSchema

    @classmethod
    def from_domain(cls, result: EligibilityResult) -> "EligibilityResultSchema":
        metrics = result.metrics
        return cls(
            eligible=result.eligible,
            score=result.score,
            risk_tier=result.risk_tier.value,
            reasons=list(result.reasons),
            strengths=list(result.strengths),
            warnings=list(result.warnings),
            recommended_amount=result.recommended_amount,
            max_amount=result.max_amount,
            metrics=EligibilityMetricsSchema(
                savings_rate=metrics.savings_rate,
                income_consistency_score=metrics.income_consistency_score,
                spending_volatility_score=metrics.spending_volatility_score,
                emergency_savings_buffer=metrics.emergency_savings_buffer,
                bill_payment_regularity=metrics.bill_payment_regularity,
                account_age_months=metrics.account_age_months,
                monthly_debt_obligations=metrics.monthly_debt_obligations,
            ),
        )
