"""Prometheus metrics."""

from .metrics import (
    DEFAULT_METRICS_PORT,
    start_metrics_server,
    set_client_info,
    record_request,
    update_connection_state,
    record_event,
)

__all__ = [
    "DEFAULT_METRICS_PORT",
    "start_metrics_server",
    "set_client_info",
    "record_request",
    "update_connection_state",
    "record_event",
]
