"""
Prometheus metrics for the Fernet token service.
"""
from prometheus_client import Counter, Gauge, Info, CollectorRegistry


class Metrics:
    """
    Centralized metrics for the token service.
    """

    def __init__(self, service_name: str = "fernetkit", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Token operations
        self.tokens_encrypted_total = Counter(
            "fernet_tokens_encrypted_total",
            "Total tokens issued",
            registry=self.registry,
        )

        self.tokens_decrypted_total = Counter(
            "fernet_tokens_decrypted_total",
            "Total tokens accepted",
            registry=self.registry,
        )

        self.tokens_rejected_total = Counter(
            "fernet_tokens_rejected_total",
            "Total tokens rejected, by error kind",
            ["reason"],
            registry=self.registry,
        )

        self.tokens_rotated_total = Counter(
            "fernet_tokens_rotated_total",
            "Total tokens re-issued under the primary key",
            registry=self.registry,
        )

        self.keys_configured = Gauge(
            "fernet_keys_configured",
            "Number of keys in the active key ring",
            registry=self.registry,
        )

    def record_encrypted(self):
        self.tokens_encrypted_total.inc()

    def record_decrypted(self):
        self.tokens_decrypted_total.inc()

    def record_rejected(self, reason: str):
        """Record a rejected token under its error kind."""
        self.tokens_rejected_total.labels(reason=reason).inc()

    def record_rotated(self):
        self.tokens_rotated_total.inc()

    def set_keys_configured(self, count: int):
        self.keys_configured.set(count)
