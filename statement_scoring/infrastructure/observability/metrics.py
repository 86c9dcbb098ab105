"""Prometheus metrics for monitoring extraction health and eligibility outcomes"""

from prometheus_client import Counter, Histogram

# Pipeline metrics
pipeline_run_counter = Counter(
    "statement_pipeline_runs_total",
    "Statement pipeline runs",
    ["format", "outcome"],  # outcome: success | unsupported_format | empty_input | extraction_failure
)

extraction_failure_counter = Counter(
    "statement_extraction_failures_total",
    "Statement extraction failures",
    ["format", "error"],
)

transactions_extracted_histogram = Histogram(
    "statement_transactions_extracted",
    "Classified transactions per statement",
    buckets=[0, 10, 25, 50, 100, 250, 500, 1000, 5000],
)

pipeline_duration_histogram = Histogram(
    "statement_pipeline_duration_seconds",
    "Extraction-to-analysis latency",
    ["format"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Eligibility metrics
eligibility_decision_counter = Counter(
    "eligibility_decisions_total",
    "Eligibility decisions made",
    ["outcome"],  # eligible | ineligible
)

recommended_amount_bucket_counter = Counter(
    "eligibility_recommended_amount_bucket",
    "Recommended loan amounts by bucket",
    ["bucket"],  # 0, 0-25k, 25k-50k, 50k+
)


def record_pipeline_run(statement_format: str, outcome: str, duration_seconds: float | None = None) -> None:
    pipeline_run_counter.labels(format=statement_format, outcome=outcome).inc()
    if duration_seconds is not None:
        pipeline_duration_histogram.labels(format=statement_format).observe(duration_seconds)


def record_extraction_failure(statement_format: str, error: str) -> None:
    extraction_failure_counter.labels(format=statement_format, error=error).inc()


def record_eligibility(eligible: bool, recommended_amount: int) -> None:
    """Record decision metrics for monitoring eligibility rates and amount distribution"""
    outcome = "eligible" if eligible else "ineligible"
    eligibility_decision_counter.labels(outcome=outcome).inc()

    # Bucket amounts for distribution analysis
    if recommended_amount == 0:
        bucket = "0"
    elif recommended_amount <= 25_000:
        bucket = "0-25k"
    elif recommended_amount <= 50_000:
        bucket = "25k-50k"
    else:
        bucket = "50k+"

    recommended_amount_bucket_counter.labels(bucket=bucket).inc()
