"""Statement pipeline - extractor, normalizer, classifier, analytics, scorer"""

import logging
import time
from datetime import datetime
from typing import Any, Dict

from statement_scoring.domain.analytics import analyze
from statement_scoring.domain.classifier import classify_rows
from statement_scoring.domain.exceptions import EmptyInputError, ExtractionFailureError, UnsupportedFormatError
from statement_scoring.domain.models import AnalysisResult, EligibilityResult
from statement_scoring.domain.normalizer import normalize_records
from statement_scoring.domain.policy import DEFAULT_CLASSIFIER_POLICY, ClassifierPolicy, ScoringPolicy
from statement_scoring.domain.scoring import score
from statement_scoring.extraction.base import EMPTY_INPUT_HINT
from statement_scoring.extraction.formats import resolve_format
from statement_scoring.extraction.registry import Extractors, extract
from statement_scoring.infrastructure.observability.logging import log_eligibility, log_pipeline_run
from statement_scoring.infrastructure.observability.metrics import (
    record_eligibility,
    record_extraction_failure,
    record_pipeline_run,
    transactions_extracted_histogram,
)
from statement_scoring.infrastructure.repositories import (
    ApplicationRecord,
    ApplicationRepository,
    new_application_record,
)

logger = logging.getLogger(__name__)


def run_pipeline(
    file_bytes: bytes,
    format_hint: str | None,
    *,
    extractors: Extractors | None = None,
    classifier_policy: ClassifierPolicy = DEFAULT_CLASSIFIER_POLICY,
    now: datetime | None = None,
) -> AnalysisResult:
    """
    Turn one uploaded statement into an AnalysisResult.

    Flow:
    1. Resolve the format from the hint (or the file signature)
    2. Extract raw records
    3. Normalize columns, dropping rows without an amount
    4. Classify income vs expense
    5. Aggregate metrics

    `now` is only consulted when no transaction date parses.

    Raises:
        UnsupportedFormatError, EmptyInputError, ExtractionFailureError
    """
    start_time = time.time()

    try:
        statement_format = resolve_format(format_hint, file_bytes)
    except UnsupportedFormatError as e:
        record_pipeline_run("unsupported", "unsupported_format")
        logger.warning("Unsupported statement format: %s", e.hint)
        raise

    label = statement_format.value
    try:
        _, records = extract(file_bytes, label, extractors)
        transactions = classify_rows(normalize_records(records), classifier_policy)
        if not transactions:
            raise EmptyInputError(EMPTY_INPUT_HINT)

    except EmptyInputError as e:
        record_pipeline_run(label, "empty_input")
        logger.warning("Empty statement: %s", e)
        raise

    except ExtractionFailureError as e:
        cause = type(e.__cause__).__name__ if e.__cause__ else "none"
        record_extraction_failure(label, cause)
        record_pipeline_run(label, "extraction_failure")
        logger.error("Extraction failed: %s", e)
        raise

    analysis = analyze(transactions, now=now)

    duration = time.time() - start_time
    record_pipeline_run(label, "success", duration)
    transactions_extracted_histogram.observe(analysis.transaction_count)
    log_pipeline_run(label, len(records), analysis.transaction_count, duration * 1000)

    return analysis


def score_eligibility(analysis: AnalysisResult, policy: ScoringPolicy | None = None) -> EligibilityResult:
    """Score an analysis; the policy defaults to the configured one"""
    result = score(analysis, policy or ScoringPolicy.from_settings())

    record_eligibility(result.eligible, result.recommended_amount)
    log_eligibility(result.eligible, result.score, result.risk_tier.value, result.recommended_amount)
    return result


def record_application(
    repository: ApplicationRepository,
    user_id: str,
    analysis: AnalysisResult,
    eligibility: EligibilityResult,
    personal_info: Dict[str, Any] | None = None,
) -> ApplicationRecord:
    """Hand the decision to the host's persistence layer"""
    return repository.save(new_application_record(user_id, analysis, eligibility, personal_info))
