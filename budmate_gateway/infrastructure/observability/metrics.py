"""Prometheus metrics for budget health outcomes, alerts, provider failures and ledger activity"""

from prometheus_client import Counter, Histogram

from budmate_gateway.domain.models import BudgetHealthResult

# Budget health metrics
budget_health_counter = Counter(
    "budmate_budget_health_total",
    "Budget health calculations",
    ["outcome"],  # calculated | no_budget | failed
)

budget_usage_bucket_counter = Counter(
    "budmate_budget_usage_bucket",
    "Budget usage reported by bucket",
    ["bucket"],  # <50%, 50-90%, 90-100%, >100%
)

budget_alert_counter = Counter(
    "budmate_budget_alerts_total",
    "Budget health results at or above the alert threshold",
)

# Provider metrics
provider_fetch_failures_counter = Counter(
    "provider_fetch_failures_total",
    "Failed budget/expense provider fetches",
    ["provider"],
)

# Ledger metrics
ledger_operation_counter = Counter(
    "budmate_ledger_operations_total",
    "Budget and expense mutations",
    ["operation"],  # deposit | expense_created | expense_paid | expense_expired
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def usage_bucket(percentage_used: float) -> str:
    if percentage_used < 50:
        return "<50%"
    elif percentage_used < 90:
        return "50-90%"
    elif percentage_used <= 100:
        return "90-100%"
    else:
        return ">100%"


def record_budget_health(result: BudgetHealthResult, has_budget: bool = True) -> None:
    """Record calculation outcome, usage distribution and alerts"""
    if not has_budget:
        budget_health_counter.labels(outcome="no_budget").inc()
        return

    budget_health_counter.labels(outcome="calculated").inc()
    budget_usage_bucket_counter.labels(bucket=usage_bucket(result.percentage_used)).inc()
    if result.should_alert:
        budget_alert_counter.inc()


def record_budget_health_failure() -> None:
    budget_health_counter.labels(outcome="failed").inc()
