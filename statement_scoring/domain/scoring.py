"""Eligibility scoring engine - core business logic for loan decisions"""

import math
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from statement_scoring.domain.models import AnalysisResult, EligibilityMetrics, EligibilityResult, RiskTier
from statement_scoring.domain.policy import ScoringPolicy

INSUFFICIENT_CRITERIA = "Insufficient criteria met"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class ScoreCard:
    """Running total of an evaluation; never clamped until the end"""

    points: int = 0
    strengths: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def score_income_vs_expenses(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    if analysis.total_income > analysis.total_expenses:
        card.points += policy.income_exceeds_points
        card.strengths.append("Income exceeds expenses")
        ratio = float(analysis.total_expenses / analysis.total_income) * 100
        if ratio < policy.low_expense_ratio_pct:
            card.points += policy.low_expense_ratio_points
            card.strengths.append("Low expense-to-income ratio")
        elif ratio > policy.high_expense_ratio_pct:
            card.warnings.append("High expense-to-income ratio")
    else:
        card.warnings.append("Expenses exceed income")


def score_monthly_savings(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    savings = f"{policy.currency_symbol}{analysis.savings_per_month:.2f}"
    if analysis.savings_per_month > policy.savings_threshold:
        card.points += policy.savings_above_threshold_points
        card.strengths.append(f"Monthly savings ({savings}) exceeds threshold")
    elif analysis.savings_per_month > 0:
        card.points += policy.savings_positive_points
        card.warnings.append(f"Monthly savings ({savings}) below threshold")
    else:
        card.warnings.append("Negative monthly savings")


def score_savings_rate(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    rate = analysis.savings_rate
    if rate >= policy.high_savings_rate_pct:
        card.points += policy.high_savings_rate_points
        card.strengths.append(f"High savings rate ({rate:.1f}%)")
    elif rate >= policy.moderate_savings_rate_pct:
        card.points += policy.moderate_savings_rate_points
        card.strengths.append(f"Moderate savings rate ({rate:.1f}%)")
    elif rate > 0:
        card.points += policy.low_savings_rate_points
        card.warnings.append(f"Low savings rate ({rate:.1f}%)")


def score_income_consistency(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    consistency = analysis.income_consistency_score
    if consistency >= policy.very_consistent_income:
        card.points += policy.very_consistent_income_points
        card.strengths.append("Very consistent income pattern")
    elif consistency >= policy.consistent_income:
        card.points += policy.consistent_income_points
        card.strengths.append("Moderately consistent income")
    elif consistency >= policy.irregular_income:
        card.points += policy.irregular_income_points
        card.warnings.append("Irregular income pattern")
    else:
        card.warnings.append("Highly irregular income")


def score_spending_volatility(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    stability = analysis.spending_volatility_score
    if stability >= policy.stable_spending:
        card.points += policy.stable_spending_points
        card.strengths.append("Stable spending patterns")
    elif stability >= policy.moderate_spending:
        card.points += policy.moderate_spending_points
        card.strengths.append("Moderately stable spending")
    else:
        card.warnings.append("High spending volatility")


def score_emergency_buffer(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    buffer = analysis.emergency_savings_buffer
    if buffer >= policy.strong_buffer_months:
        card.points += policy.strong_buffer_points
        card.strengths.append(f"Strong emergency buffer ({buffer:.1f} months)")
    elif buffer >= policy.adequate_buffer_months:
        card.points += policy.adequate_buffer_points
        card.strengths.append(f"Adequate emergency buffer ({buffer:.1f} months)")
    elif buffer > 0:
        card.points += policy.low_buffer_points
        card.warnings.append(f"Low emergency buffer ({buffer:.1f} months)")
    else:
        card.warnings.append("No emergency savings buffer")


def score_bill_regularity(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    if analysis.bill_payment_regularity >= policy.regular_bills_threshold:
        card.points += policy.regular_bills_points
        card.strengths.append("Regular bill payments detected")
    else:
        card.points += policy.irregular_bills_points


def score_account_age(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    months = analysis.account_age_months
    if months >= policy.long_history_months:
        card.points += policy.long_history_points
        card.strengths.append(f"Long account history ({round_half_up(months)} months)")
    elif months >= policy.moderate_history_months:
        card.points += policy.moderate_history_points
        card.strengths.append(f"Moderate account history ({round_half_up(months)} months)")
    else:
        card.warnings.append(f"Short account history ({round_half_up(months)} months)")


def score_debt_obligations(analysis: AnalysisResult, policy: ScoringPolicy, card: ScoreCard) -> None:
    if analysis.monthly_debt_obligations <= 0:
        return
    # Debt with no income at all is the worst case
    if analysis.average_monthly_income > 0:
        debt_ratio = analysis.monthly_debt_obligations / analysis.average_monthly_income * 100
    else:
        debt_ratio = math.inf

    if debt_ratio > policy.high_debt_ratio_pct:
        card.points -= policy.high_debt_penalty
        card.warnings.append(f"High debt obligations ({debt_ratio:.1f}% of income)")
    elif debt_ratio > policy.moderate_debt_ratio_pct:
        card.points -= policy.moderate_debt_penalty
        card.warnings.append(f"Moderate debt obligations ({debt_ratio:.1f}% of income)")
    else:
        card.strengths.append(f"Low debt obligations ({debt_ratio:.1f}% of income)")


ScoringRule = Callable[[AnalysisResult, ScoringPolicy, ScoreCard], None]

# Evaluation order is part of the model
SCORING_RULES: Tuple[ScoringRule, ...] = (
    score_income_vs_expenses,
    score_monthly_savings,
    score_savings_rate,
    score_income_consistency,
    score_spending_volatility,
    score_emergency_buffer,
    score_bill_regularity,
    score_account_age,
    score_debt_obligations,
)


def determine_risk_tier(score: int, policy: ScoringPolicy) -> RiskTier:
    """
    Map final score to a risk tier.

    - below 40: high
    - below 60: medium
    - below 80: low
    - otherwise: very-low
    """
    if score < policy.high_risk_below:
        return RiskTier.HIGH
    elif score < policy.medium_risk_below:
        return RiskTier.MEDIUM
    elif score < policy.low_risk_below:
        return RiskTier.LOW
    else:
        return RiskTier.VERY_LOW


def is_eligible(analysis: AnalysisResult, score: int, policy: ScoringPolicy) -> bool:
    return (
        score >= policy.min_eligible_score
        and analysis.savings_per_month > policy.savings_threshold
        and analysis.total_income > analysis.total_expenses
        and analysis.savings_rate > policy.min_savings_rate
    )


def calculate_loan_amount(analysis: AnalysisResult, score: int, policy: ScoringPolicy) -> float:
    """Savings-multiple scaled by score, capped, never negative"""
    base_amount = analysis.savings_per_month * policy.loan_savings_multiple
    return max(min(base_amount * (score / 100), policy.loan_cap), 0.0)


def score(analysis: AnalysisResult, policy: ScoringPolicy | None = None) -> EligibilityResult:
    """
    Main entry point: run the additive point model over an analysis.

    Pure and deterministic; degenerate analyses score low instead of raising.
    """
    policy = policy or ScoringPolicy()
    card = ScoreCard()
    for rule in SCORING_RULES:
        rule(analysis, policy, card)

    final_score = int(max(0, min(100, card.points)))
    eligible = is_eligible(analysis, final_score, policy)
    amount = round_half_up(calculate_loan_amount(analysis, final_score, policy))

    if eligible:
        reasons = tuple(card.strengths)
    elif card.warnings:
        reasons = tuple(card.warnings)
    else:
        reasons = (INSUFFICIENT_CRITERIA,)

    return EligibilityResult(
        eligible=eligible,
        score=final_score,
        risk_tier=determine_risk_tier(final_score, policy),
        strengths=tuple(card.strengths),
        warnings=tuple(card.warnings),
        reasons=reasons,
        recommended_amount=amount if eligible else 0,
        max_amount=amount,
        metrics=EligibilityMetrics(
            savings_rate=analysis.savings_rate,
            income_consistency_score=analysis.income_consistency_score,
            spending_volatility_score=analysis.spending_volatility_score,
            emergency_savings_buffer=analysis.emergency_savings_buffer,
            bill_payment_regularity=analysis.bill_payment_regularity,
            account_age_months=analysis.account_age_months,
            monthly_debt_obligations=analysis.monthly_debt_obligations,
        ),
    )
