# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics: single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "mealsignup_requests_total",
    "Total HTTP requests to the meal signup service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "mealsignup_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "mealsignup_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
COMMITMENTS_CREATED = Counter(
    "mealsignup_commitments_created_total",
    "Total meal commitments created",
)
COMMITMENTS_CANCELLED = Counter(
    "mealsignup_commitments_cancelled_total",
    "Total meal commitments cancelled",
    ["actor_role"],
)
SLOT_CONFLICTS = Counter(
    "mealsignup_slot_conflicts_total",
    "Create attempts rejected as SlotUnavailable",
    ["reason"],
)
INTEGRITY_WARNINGS = Counter(
    "mealsignup_integrity_warnings_total",
    "Commitment records skipped or overridden while indexing",
    ["kind"],
)
CALENDAR_BUILDS = Counter(
    "mealsignup_calendar_builds_total",
    "Total calendar grids assembled",
)
CALENDAR_BUILD_SECONDS = Histogram(
    "mealsignup_calendar_build_seconds",
    "Time to expand, index, reconcile and assemble one calendar",
)
