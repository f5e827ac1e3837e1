"""Prometheus metrics for analysis outcomes, model calls and chatbot extraction"""

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "wealthease_analysis_total",
    "Financial analyses produced",
    ["source"],  # llm | fallback | local
)

# Language model metrics
llm_latency_histogram = Histogram(
    "llm_latency_seconds",
    "Language model completion time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

llm_failures_counter = Counter(
    "llm_failures_total",
    "Failed language model calls",
    ["reason"],  # quota | auth | timeout | upstream
)

# Chatbot metrics
chatbot_extraction_counter = Counter(
    "wealthease_chatbot_extractions_total",
    "Chatbot transaction extraction attempts",
    ["outcome"],  # extracted | rejected
)

# Rate limiting
rate_limited_counter = Counter(
    "rate_limited_requests_total",
    "Requests rejected by a rate limiter",
    ["limiter"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(parsed_ok: bool) -> None:
    """Count a model-backed analysis by whether its output parsed"""
    analysis_counter.labels(source="llm" if parsed_ok else "fallback").inc()


def record_local_analysis() -> None:
    analysis_counter.labels(source="local").inc()


def record_extraction(extracted: bool) -> None:
    chatbot_extraction_counter.labels(outcome="extracted" if extracted else "rejected").inc()
