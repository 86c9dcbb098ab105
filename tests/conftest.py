"""Pytest fixtures for testing"""

import dataclasses
import io
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, List

import pandas as pd
import pytest

from statement_scoring.domain.exceptions import RecognitionFailureError
from statement_scoring.domain.models import AnalysisResult, DateRange, Transaction, TransactionKind

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0)


class StubTextReader:
    """Document text reader returning canned text"""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error

    def extract_text(self, pdf_bytes: bytes) -> str:
        if self.error:
            raise self.error
        return self.text


class StubRecognizer:
    """Text recognizer returning canned text"""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, image_bytes: bytes) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def text_reader() -> Callable[..., StubTextReader]:
    return StubTextReader


@pytest.fixture
def recognizer() -> Callable[..., StubRecognizer]:
    return StubRecognizer


@pytest.fixture
def failing_recognizer() -> StubRecognizer:
    return StubRecognizer(error=RecognitionFailureError("Tesseract failed: engine crashed"))


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    def _make(day: str, amount, kind: str, description: str = "Misc") -> Transaction:
        return Transaction(
            date=day,
            description=description,
            amount=Decimal(str(amount)),
            kind=TransactionKind(kind),
        )

    return _make


@pytest.fixture
def sample_transactions(make_transaction) -> List[Transaction]:
    """Three monthly salary deposits and weekly grocery spending"""
    base_date = date(2024, 1, 1)
    transactions = []

    # Simulate monthly salary deposits
    for month in range(3):
        day = base_date + timedelta(days=month * 30)
        transactions.append(make_transaction(day.isoformat(), 50000, "income", "Salary Deposit"))

    # Regular spending
    for offset in range(0, 90, 7):
        day = base_date + timedelta(days=offset)
        transactions.append(make_transaction(day.isoformat(), 2000, "expense", "Groceries"))

    return transactions


@pytest.fixture
def make_analysis() -> Callable[..., AnalysisResult]:
    """
    Healthy two-month analysis; override any field.

    Scores 107 raw points (100 after clamping) with the default policy.
    """
    base = AnalysisResult(
        total_income=Decimal(100000),
        total_expenses=Decimal(40000),
        savings=Decimal(60000),
        average_monthly_income=50000.0,
        average_monthly_expenses=20000.0,
        savings_per_month=30000.0,
        savings_rate=60.0,
        income_consistency_score=90.0,
        spending_volatility_score=90.0,
        emergency_savings_buffer=3.0,
        bill_payment_regularity=100,
        account_age_months=2.0,
        monthly_debt_obligations=0.0,
        total_debt_obligations=Decimal(0),
        months_span=2.0,
        date_range=DateRange(start=date(2024, 1, 1), end=date(2024, 3, 1), days=60),
        transaction_count=10,
    )

    def _make(**overrides) -> AnalysisResult:
        return dataclasses.replace(base, **overrides)

    return _make


@pytest.fixture
def build_xlsx() -> Callable[[List[dict]], bytes]:
    def _build(rows: List[dict]) -> bytes:
        buffer = io.BytesIO()
        pd.DataFrame(rows).to_excel(buffer, index=False, engine="openpyxl")
        return buffer.getvalue()

    return _build
