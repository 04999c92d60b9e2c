# reunitems/core/audit.py
import logging
import uuid
from datetime import datetime, timezone

from reunitems.core import store
from reunitems.core.errors import StoreError
from reunitems.core.logger import log_to_cloud

logger = logging.getLogger("core.audit")


async def log_event(
    actor: str,
    action: str,
    category: str = "system",
    severity: str = "INFO",
    ip: str = None,
    user_agent: str = None,
    metadata: dict = None
):
    """
    Generic audit logger.
    Stores structured events in Firestore under audit_logs/{log_id}.

    The audited action has already happened when this runs, so a failed write
    is logged rather than raised.
    """
    log_id = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    log_to_cloud(category, severity, f"{actor} {action}", metadata)

    try:
        await store.set_document(store.build_path(store.AUDIT_LOGS, log_id), {
            "actor": actor,
            "action": action,
            "ip": ip,
            "user_agent": user_agent,
            "category": category,       # e.g., auth, organization, membership
            "severity": severity,       # INFO, WARN, ERROR
            "timestamp": now.isoformat(),
            "metadata": metadata or {}
        })
    except StoreError:
        logger.exception("Audit write failed for action=%s actor=%s", action, actor)


# -----------------------------
# Helper functions
# -----------------------------

async def log_auth_failure(actor: str, ip: str, user_agent: str, reason: str):
    await log_event(
        actor=actor,
        action="auth_failure",
        category="auth",
        severity="WARN",
        ip=ip,
        user_agent=user_agent,
        metadata={"reason": reason}
    )


async def log_token_reuse(actor: str, jti: str, ip: str, user_agent: str):
    await log_event(
        actor=actor,
        action="refresh_token_reuse_detected",
        category="token",
        severity="ERROR",
        ip=ip,
        user_agent=user_agent,
        metadata={"jti": jti}
    )


async def log_decision(actor: str, action: str, organization_id: str, metadata: dict = None):
    await log_event(
        actor=actor,
        action=action,
        category="organization",
        metadata={"organization_id": organization_id, **(metadata or {})}
    )
