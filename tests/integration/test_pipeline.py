"""Integration tests for the statement pipeline"""

import logging
from decimal import Decimal

import pytest
from prometheus_client import REGISTRY

from statement_scoring.domain.exceptions import (
    EmptyInputError,
    ExtractionFailureError,
    UnsupportedFormatError,
)
from statement_scoring.domain.models import RiskTier
from statement_scoring.extraction.document import DocumentTextExtractor
from statement_scoring.extraction.formats import StatementFormat
from statement_scoring.extraction.image import ImageTextExtractor
from statement_scoring.infrastructure.repositories import InMemoryApplicationRepository
from statement_scoring.pipeline import record_application, run_pipeline, score_eligibility
from statement_scoring.schemas import AnalysisResultSchema, EligibilityResultSchema

pytestmark = pytest.mark.integration

SIMPLE_CSV = b"date,amount,type\n2024-01-05,50000,credit\n2024-01-10,12000,debit\n"


def sample_value(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_csv_statement_end_to_end():
    """Test a two-row CSV flows through to an eligible decision"""
    analysis = run_pipeline(SIMPLE_CSV, "statement.csv")

    assert analysis.total_income == Decimal(50000)
    assert analysis.total_expenses == Decimal(12000)
    assert analysis.savings == Decimal(38000)

    eligibility = score_eligibility(analysis)

    assert eligibility.eligible is True
    assert eligibility.score == 100
    assert eligibility.risk_tier == RiskTier.VERY_LOW
    assert eligibility.recommended_amount == 100000


def test_spreadsheet_with_split_columns(build_xlsx):
    """Test withdrawal/deposit columns decide direction"""
    data = build_xlsx([
        {"Transaction Date": "2024-01-01", "Narration": "Salary", "Withdrawal": "", "Deposit": "40000", "Balance": "40000"},
        {"Transaction Date": "2024-01-15", "Narration": "Rent", "Withdrawal": "12000", "Deposit": "", "Balance": "28000"},
        {"Transaction Date": "2024-02-01", "Narration": "Salary", "Withdrawal": "", "Deposit": "40000", "Balance": "68000"},
        {"Transaction Date": "2024-02-15", "Narration": "Rent", "Withdrawal": "12000", "Deposit": "", "Balance": "56000"},
    ])

    analysis = run_pipeline(data, "statement.xlsx")

    assert analysis.total_income == Decimal(80000)
    assert analysis.total_expenses == Decimal(24000)
    assert analysis.date_range.days == 45
    assert analysis.months_span == pytest.approx(1.5)
    assert [(p.description, p.amount, p.occurrence_count) for p in analysis.recurring_patterns] == [
        ("Rent", 12000, 2),
        ("Salary", 40000, 2),
    ]
    assert analysis.bill_payment_regularity == 100


def test_document_statement(text_reader):
    text = (
        "Date Description Amount\n"
        "01/05/2024 Salary Credit 50,000.00\n"
        "01/10/2024 ATM Withdrawal -2,000.00\n"
        "01/20/2024 Grocery store -1,500.00\n"
    )
    extractors = {StatementFormat.DOCUMENT: DocumentTextExtractor(reader=text_reader(text))}

    analysis = run_pipeline(b"%PDF-1.4 stub", None, extractors=extractors)

    assert analysis.total_income == Decimal("50000.00")
    assert analysis.total_expenses == Decimal("3500.00")
    assert analysis.transaction_count == 3


def test_image_statement(recognizer):
    text = (
        "Date Description Debit Credit Balance\n"
        "01/02/2024 Opening deposit 20,000.00 20,000.00\n"
        "01/05/2024 Card purchase 1,200.00 18,800.00\n"
        "01/31/2024 Salary deposit 30,000.00 48,800.00\n"
    )
    extractors = {StatementFormat.IMAGE: ImageTextExtractor(recognizer=recognizer(text))}

    analysis = run_pipeline(b"\x89PNG\r\n\x1a\n", "image/png", extractors=extractors)

    assert analysis.total_income == Decimal("50000.00")
    assert analysis.total_expenses == Decimal("1200.00")
    assert [b.month_key for b in analysis.monthly_buckets] == ["2024-01"]


def test_far_apart_dates_use_full_span():
    data = b"date,amount,type\n2000-01-01,60000,credit\n2030-01-01,1000,debit\n"

    analysis = run_pipeline(data, "csv")

    assert analysis.date_range.days == 10958
    assert analysis.average_monthly_income == pytest.approx(60000 / (10958 / 30))


def test_blank_rows_only_is_empty_input():
    before = sample_value("statement_pipeline_runs_total", {"format": "delimited", "outcome": "empty_input"})

    with pytest.raises(EmptyInputError):
        run_pipeline(b"date,amount,type\n,,\n,,\n", "statement.csv")

    after = sample_value("statement_pipeline_runs_total", {"format": "delimited", "outcome": "empty_input"})
    assert after == before + 1


def test_rows_without_amounts_is_empty_input():
    with pytest.raises(EmptyInputError):
        run_pipeline(b"date,description\n2024-01-05,Opening\n2024-01-06,Closing\n", "statement.csv")


def test_empty_file_is_empty_input():
    with pytest.raises(EmptyInputError):
        run_pipeline(b"", "statement.csv")


def test_unsupported_format_counted():
    labels = {"format": "unsupported", "outcome": "unsupported_format"}
    before = sample_value("statement_pipeline_runs_total", labels)

    with pytest.raises(UnsupportedFormatError):
        run_pipeline(b"whatever", "statement.docx")

    assert sample_value("statement_pipeline_runs_total", labels) == before + 1


def test_unsupported_format_logged_with_hint(caplog):
    """Test the warning keeps the hint as a lazy log argument"""
    with caplog.at_level(logging.WARNING, logger="statement_scoring.pipeline"):
        with pytest.raises(UnsupportedFormatError):
            run_pipeline(b"whatever", "statement.docx")

    record = next(r for r in caplog.records if r.name == "statement_scoring.pipeline")
    assert record.levelno == logging.WARNING
    assert record.args == ("statement.docx",)
    assert record.getMessage() == "Unsupported statement format: statement.docx"


def test_recognition_failure_surfaces_as_extraction_failure(failing_recognizer):
    labels = {"format": "image", "error": "RecognitionFailureError"}
    before = sample_value("statement_extraction_failures_total", labels)
    extractors = {StatementFormat.IMAGE: ImageTextExtractor(recognizer=failing_recognizer)}

    with pytest.raises(ExtractionFailureError):
        run_pipeline(b"\x89PNG\r\n\x1a\n", "photo.jpg", extractors=extractors)

    assert sample_value("statement_extraction_failures_total", labels) == before + 1


def test_pipeline_is_deterministic(fixed_now):
    """Test the same bytes produce identical serialized results"""
    first = run_pipeline(SIMPLE_CSV, "statement.csv", now=fixed_now)
    second = run_pipeline(SIMPLE_CSV, "statement.csv", now=fixed_now)

    assert first == second
    assert AnalysisResultSchema.from_domain(first).model_dump_json() == (
        AnalysisResultSchema.from_domain(second).model_dump_json()
    )
    assert EligibilityResultSchema.from_domain(score_eligibility(first)) == (
        EligibilityResultSchema.from_domain(score_eligibility(second))
    )


def test_success_metrics_recorded():
    labels = {"format": "delimited", "outcome": "success"}
    before = sample_value("statement_pipeline_runs_total", labels)
    decisions_before = sample_value("eligibility_decisions_total", {"outcome": "eligible"})

    score_eligibility(run_pipeline(SIMPLE_CSV, "statement.csv"))

    assert sample_value("statement_pipeline_runs_total", labels) == before + 1
    assert sample_value("eligibility_decisions_total", {"outcome": "eligible"}) == decisions_before + 1


def test_schema_monthly_breakdown():
    payload = AnalysisResultSchema.from_domain(run_pipeline(SIMPLE_CSV, "statement.csv")).model_dump(mode="json")

    assert payload["monthly_breakdown"] == [
        {"month": "2024-01", "income": "50000", "expenses": "12000", "savings": "38000", "transaction_count": 2}
    ]
    assert {t["kind"] for t in payload["transactions"]} == {"income", "expense"}


def test_record_application_roundtrip():
    repository = InMemoryApplicationRepository()
    analysis = run_pipeline(SIMPLE_CSV, "statement.csv")
    eligibility = score_eligibility(analysis)

    record = record_application(repository, "user_1", analysis, eligibility, {"name": "A. Borrower"})

    assert record.status == "approved"
    assert repository.list_for_user("user_1") == [record]
