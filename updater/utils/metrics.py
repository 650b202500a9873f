"""
Prometheus Metrics Module

Counters for the manifest fetch path and the update decisions it drives.
Exposed at /metrics for Prometheus scraping.
"""

from prometheus_client import Counter, Info

# =============================================================================
# Application Info
# =============================================================================

APP_INFO = Info("updater_app", "Plugin updater information")


def set_app_info(version: str, environment: str) -> None:
    """Set application info labels."""
    APP_INFO.info({"version": version, "environment": environment})


# =============================================================================
# Manifest Metrics
# =============================================================================

MANIFEST_FETCH_TOTAL = Counter(
    "updater_manifest_fetch_total",
    "Manifest fetch attempts by outcome",
    ["outcome"],
)

UPDATES_OFFERED_TOTAL = Counter(
    "updater_updates_offered_total",
    "Update candidates injected into the update transient",
)

# =============================================================================
# Cache Metrics
# =============================================================================

CACHE_OPERATIONS_TOTAL = Counter(
    "updater_cache_operations_total",
    "Cache operations by backend and result",
    ["backend", "result"],
)


def record_manifest_fetch(outcome: str) -> None:
    """Record a manifest fetch outcome ("ok" or an error class name)."""
    MANIFEST_FETCH_TOTAL.labels(outcome=outcome).inc()


def record_update_offered() -> None:
    UPDATES_OFFERED_TOTAL.inc()


def record_cache_hit(backend: str = "memory") -> None:
    """Record a cache hit."""
    CACHE_OPERATIONS_TOTAL.labels(backend=backend, result="hit").inc()


def record_cache_miss(backend: str = "memory") -> None:
    """Record a cache miss."""
    CACHE_OPERATIONS_TOTAL.labels(backend=backend, result="miss").inc()
