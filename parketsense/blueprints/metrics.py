"""
Prometheus metrics blueprint.

Exposes /metrics with HTTP request metrics and the number of orders in each
derived overall status. Restrict it to the monitoring network in production.
"""
from flask import Blueprint, Response, request, g, current_app
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
from sqlalchemy.exc import SQLAlchemyError
import time
import os

from parketsense.database import get_session
from parketsense.models import Order
from parketsense.services.order_status_service import count_by_status

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share metrics through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

_metric_registry = registry if not MULTIPROCESS_MODE else None

http_requests_total = Counter(
    'parketsense_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=_metric_registry
)

http_request_duration_seconds = Histogram(
    'parketsense_http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    registry=_metric_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_requests_in_flight = Gauge(
    'parketsense_http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=_metric_registry
)

orders_by_status = Gauge(
    'parketsense_orders_by_status',
    'Orders per derived overall status',
    ['status'],
    registry=_metric_registry,
    multiprocess_mode='livemax'
)


def setup_metrics_instrumentation(app):
    """Register before/after request hooks that feed the HTTP metrics."""

    @app.before_request
    def before_request_metrics():
        g._prometheus_metrics_start_time = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def after_request_metrics(response):
        if not hasattr(g, '_prometheus_metrics_start_time'):
            return response

        duration = time.time() - g._prometheus_metrics_start_time
        endpoint = request.endpoint or 'unknown'

        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(duration)
        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            http_status=response.status_code
        ).inc()
        http_requests_in_flight.dec()
        return response


def refresh_order_gauges():
    """Recount orders per overall status (the status is derived, so it is counted on scrape)."""
    session = get_session()
    try:
        counts = count_by_status(session.query(Order).all())
    except SQLAlchemyError as e:
        current_app.logger.warning(f"Failed to refresh order metrics: {e}")
        return
    for status, count in counts.items():
        orders_by_status.labels(status=status).set(count)


@metrics_bp.route('/metrics')
def metrics():
    """
    Prometheus metrics endpoint.

    Not covered by the API key; keep it off the public network.
    """
    refresh_order_gauges()
    data = generate_latest(registry)
    return Response(data, mimetype=CONTENT_TYPE_LATEST)
