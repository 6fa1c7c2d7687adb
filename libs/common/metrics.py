"""Metrics collection for the system properties services.

Provides a thin convenience wrapper around ``prometheus_client`` so the
System service records HTTP traffic and property lookups with consistent
label sets.

Design notes
- Metrics and labels are predeclared to avoid cardinality explosions; the
  looked-up key is never used as a label
- A single registry is kept per collector (can be injected for tests)
"""

from typing import Optional

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection for a service.

    Parameters
    - service_name: Logical name of the owning service
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        # GET /properties is timed and counted on its own.
        self.properties_requests = Counter(
            'system_properties_requests_total',
            'Number of times the system properties are requested',
            registry=self.registry
        )

        self.properties_duration = Histogram(
            'system_properties_request_duration_seconds',
            'Time needed to get the system properties',
            registry=self.registry
        )

        self.property_lookups = Counter(
            'system_property_lookups_total',
            'Property lookups by key, partitioned by outcome',
            ['outcome'],
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_properties_request(self, duration: float) -> None:
        """Record one full property listing."""
        self.properties_requests.inc()
        self.properties_duration.observe(duration)

    def record_property_lookup(self, found: bool) -> None:
        """Record a key lookup as ``hit`` or ``miss``."""
        self.property_lookups.labels(outcome="hit" if found else "miss").inc()

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create the metrics collector for a service.

    Returns a process-wide singleton to avoid duplicate collectors/labels.
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
        logger.debug("Metrics collector created", service=service_name)
    return _metrics_collector
