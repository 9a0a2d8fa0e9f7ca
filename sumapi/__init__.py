"""Sum microservice: health probes, a numeric sum endpoint and Prometheus metrics."""

__version__ = "1.0.0"
