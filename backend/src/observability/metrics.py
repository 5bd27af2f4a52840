"""Prometheus metrics for stage validation.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

validation_runs_total = Counter(
    "ondc_validation_runs_total",
    "Total stage validations run",
    ["stage", "outcome"]  # outcome: valid|invalid
)

validation_issues_total = Counter(
    "ondc_validation_issues_total",
    "Total validation issues reported",
    ["stage", "code"]
)

validation_duration_seconds = Histogram(
    "ondc_validation_duration_seconds",
    "Time spent validating one stage message in seconds",
    ["stage"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

validation_rule_failures_total = Counter(
    "ondc_rule_failures_total",
    "Field validators that hit an internal fault",
    ["stage", "rule"]
)
