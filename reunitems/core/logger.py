# reunitems/core/logger.py
import logging

from reunitems.core.config import CLOUD_LOGGING_ENABLED, LOG_LEVEL

_configured = False


def setup_logging() -> None:
    """Configure root logging once; attach Google Cloud Logging when enabled."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if CLOUD_LOGGING_ENABLED:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=getattr(logging, LOG_LEVEL, logging.INFO))
        logging.getLogger("core.logger").info("Cloud logging attached")

    _configured = True


def log_to_cloud(category: str, severity: str, message: str, metadata: dict = None):
    logging.log(
        getattr(logging, severity.upper(), logging.INFO),
        f"[{category}] {message}",
        extra={"metadata": metadata or {}}
    )
