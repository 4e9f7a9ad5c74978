"""Prometheus metrics for monitoring verdict mix, stress levels and narrator health"""

from prometheus_client import Counter, Histogram

# Decision metrics
decision_counter = Counter(
    "drive_decision_total",
    "Total buy-vs-lease decisions made",
    ["verdict", "confidence"],
)

stress_score_histogram = Histogram(
    "drive_decision_stress_score",
    "Baseline stress scores by option",
    ["option"],  # buy | lease
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

invalid_input_counter = Counter(
    "drive_decision_invalid_input_total",
    "Decisions rejected by input validation",
)

# Explanation metrics
explanation_counter = Counter(
    "drive_explanation_total",
    "Explanations served",
    ["source", "fallback_reason"],  # deterministic | ai
)

allowlist_rejection_counter = Counter(
    "drive_explanation_allowlist_rejections_total",
    "Generated narratives rejected for citing numbers outside the allowlist",
)

# Narrator metrics
narrator_latency_histogram = Histogram(
    "narrator_latency_seconds",
    "Narrative generator response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

narrator_failure_counter = Counter(
    "narrator_failures_total",
    "Failed narrative generator calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_decision(verdict: str, confidence: str, buy_stress: float, lease_stress: float) -> None:
    """Record decision metrics for monitoring verdict mix and stress distribution"""
    decision_counter.labels(verdict=verdict, confidence=confidence).inc()
    stress_score_histogram.labels(option="buy").observe(buy_stress)
    stress_score_histogram.labels(option="lease").observe(lease_stress)


def record_explanation(source: str, fallback_reason: str | None) -> None:
    explanation_counter.labels(source=source, fallback_reason=fallback_reason or "none").inc()
