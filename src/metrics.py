"""Prometheus metrics for the auto-ingress controller."""

from prometheus_client import Counter, Histogram, Gauge, Info

# Event processing metrics
EVENTS_TOTAL = Counter(
    "auto_ingress_events_total",
    "Total number of Service events processed",
    ["event", "action"],
)

EVENT_QUEUE_DEPTH = Gauge(
    "auto_ingress_event_queue_depth",
    "Number of Service events waiting to be processed",
)

INGRESS_OPERATIONS = Counter(
    "auto_ingress_ingress_operations_total",
    "Total number of Ingress create/delete operations",
    ["operation", "status"],
)

# Kubernetes API metrics
KUBERNETES_API_CALLS = Counter(
    "auto_ingress_kubernetes_api_calls_total",
    "Total number of Kubernetes API calls",
    ["resource", "operation", "status"],
)

KUBERNETES_API_DURATION = Histogram(
    "auto_ingress_kubernetes_api_duration_seconds",
    "Time spent in Kubernetes API calls",
    ["resource", "operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Bootstrap metrics
BOOTSTRAP_RUNS = Counter(
    "auto_ingress_bootstrap_runs_total",
    "Total number of startup reconciliations",
    ["status"],
)

BOOTSTRAP_DURATION = Histogram(
    "auto_ingress_bootstrap_duration_seconds",
    "Time spent in startup reconciliation",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

# Inventory state
MANAGED_INGRESSES = Gauge(
    "auto_ingress_managed_ingresses",
    "Number of Ingresses currently tracked by the controller",
)

# Controller info
CONTROLLER_INFO = Info(
    "auto_ingress",
    "Information about the auto-ingress controller",
)


def set_controller_info(version: str, domain: str) -> None:
    """Set controller info labels."""
    CONTROLLER_INFO.info({"version": version, "domain": domain})


def init_metrics() -> None:
    """Initialize all metrics with zero values.

    Prometheus metrics with labels don't appear until used.
    This ensures all metrics are visible immediately at startup.
    """
    events = ["Added", "Updated", "Deleted"]
    actions = ["created", "deleted", "noop", "failed"]
    statuses = ["success", "error"]

    for event in events:
        for action in actions:
            EVENTS_TOTAL.labels(event=event, action=action)

    for operation in ["create", "delete"]:
        for status in statuses:
            INGRESS_OPERATIONS.labels(operation=operation, status=status)

    for status in statuses:
        BOOTSTRAP_RUNS.labels(status=status)

    EVENT_QUEUE_DEPTH.set(0)
    MANAGED_INGRESSES.set(0)
