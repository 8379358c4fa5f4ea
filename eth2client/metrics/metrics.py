"""Prometheus metrics for eth2client."""

import logging
import threading

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)

logger = logging.getLogger(__name__)

DEFAULT_METRICS_PORT = 8008

# Client info
client_info = Info(
    "eth2client",
    "Client information",
)

# Beacon API metrics
requests_total = Counter(
    "eth2client_requests_total",
    "Total requests to the beacon node",
    ["method", "endpoint", "result"],
)

request_duration = Histogram(
    "eth2client_request_duration_seconds",
    "Beacon node request duration",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Connection state
connection_state = Gauge(
    "eth2client_connection_state",
    "Whether the beacon node is in the given state (1) or not (0)",
    ["state"],
)

# Events
events_total = Counter(
    "eth2client_events_total",
    "Total events received from the beacon node",
    ["topic"],
)


_server_started = False
_server_lock = threading.Lock()


def start_metrics_server(port: int = DEFAULT_METRICS_PORT) -> bool:
    """Start the Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default 8008)

    Returns:
        True if server started successfully, False if already running
    """
    global _server_started

    with _server_lock:
        if _server_started:
            logger.warning("Metrics server already running")
            return False

        try:
            start_http_server(port)
            _server_started = True
            logger.info(f"Prometheus metrics server started on port {port}")
            return True
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return False


def set_client_info(version: str, address: str, preset: str) -> None:
    """Set client information metric."""
    client_info.info({
        "version": version,
        "address": address,
        "preset": preset,
    })


def record_request(method: str, endpoint: str, result: str, duration: float) -> None:
    """Record a beacon node request.

    Args:
        method: HTTP method
        endpoint: Endpoint template, e.g. "/eth/v2/validator/blocks/{slot}"
        result: "succeeded", "failed" or "cancelled"
        duration: Request latency in seconds
    """
    requests_total.labels(method=method, endpoint=endpoint, result=result).inc()
    request_duration.labels(method=method, endpoint=endpoint).observe(duration)


def update_connection_state(active: bool, synced: bool) -> None:
    """Update connection state metrics."""
    connection_state.labels(state="active").set(1 if active else 0)
    connection_state.labels(state="synced").set(1 if synced else 0)


def record_event(topic: str) -> None:
    """Record an event received from the stream."""
    events_total.labels(topic=topic).inc()
