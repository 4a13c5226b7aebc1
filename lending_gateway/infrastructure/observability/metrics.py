"""Prometheus metrics for application volume, score distribution and loan workflows"""

from prometheus_client import Counter, Histogram

# Application metrics
loan_application_counter = Counter(
    "lending_loan_application_total",
    "Loan applications submitted",
    ["purpose"],
)

loan_amount_histogram = Histogram(
    "lending_loan_amount",
    "Requested principal per application",
    buckets=[1_000, 5_000, 10_000, 25_000, 50_000, 100_000, 250_000, 1_000_000],
)

# Scoring metrics
credit_report_counter = Counter(
    "lending_credit_report_total",
    "Credit reports generated",
    ["score_range"],  # Excellent | Good | Fair | Poor | No Credit History
)

# Workflow metrics
status_change_counter = Counter(
    "lending_loan_status_change_total",
    "Loan status updates by target status",
    ["status"],
)

payment_counter = Counter(
    "lending_payment_recorded_total",
    "Payments applied to repayment schedules",
    ["outcome"],  # paid | late | partial
)

storage_failures_counter = Counter(
    "storage_failures_total",
    "Failed database operations",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_application(purpose: str, loan_amount: float) -> None:
    loan_application_counter.labels(purpose=purpose).inc()
    loan_amount_histogram.observe(loan_amount)


def record_credit_report(score_range: str) -> None:
    credit_report_counter.labels(score_range=score_range).inc()
