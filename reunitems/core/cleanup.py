# reunitems/core/cleanup.py
import logging
from datetime import datetime, timezone, timedelta

from reunitems.core import store
from reunitems.core.config import AUDIT_RETENTION_DAYS

logger = logging.getLogger("core.cleanup")


async def _delete_older_than(collection: str, field: str, cutoff: datetime) -> int:
    docs = await store.list_documents(collection, [(field, "<", cutoff.isoformat())])
    for doc in docs:
        await store.delete_document(store.build_path(collection, doc["id"]))
    return len(docs)


async def cleanup_expired_tokens() -> int:
    """Delete expired refresh tokens from Firestore."""
    count = await _delete_older_than(store.REFRESH_TOKENS, "expires_at", datetime.now(timezone.utc))
    logger.info("Removed %d expired refresh tokens", count)
    return count


async def cleanup_old_audit_logs(retention_days: int = AUDIT_RETENTION_DAYS) -> int:
    """Delete audit logs older than retention_days (default: 90 days)."""
    cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
    count = await _delete_older_than(store.AUDIT_LOGS, "timestamp", cutoff)
    logger.info("Removed %d audit log entries older than %d days", count, retention_days)
    return count
