from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodlog_requests_total",
    "Total HTTP requests processed by Moodlog",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodlog_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodlog_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

MOOD_ENTRIES_SAVED = Counter(
    "moodlog_mood_entries_saved_total",
    "Mood ratings written, by outcome",
    ("result",),
)

QUOTES_SERVED = Counter(
    "moodlog_quotes_served_total",
    "Quotes surfaced to users, by source",
    ("source",),
)

TEXT_SERVICE_FAILURES = Counter(
    "moodlog_text_service_failures_total",
    "Failed or skipped calls to the text generation service",
    ("reason",),
)

__all__ = [
    "MOOD_ENTRIES_SAVED",
    "QUOTES_SERVED",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "TEXT_SERVICE_FAILURES",
]
