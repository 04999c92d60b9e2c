# file: reunitems/CLAIMS/claims.py
"""
Claims live in the top-level Claims collection.

Each claim stores a reference to the item and to the claimant, plus the
item's (organization, item) pair so claims can be listed per item without
resolving references. Name, email and item details are copied in at claim
time for display.
"""

import logging
from typing import Any, Dict, List, Optional

from reunitems.core import store
from reunitems.core.errors import NotFoundError
from reunitems.CLAIMS.models import Claim
from reunitems.ITEMS import items
from reunitems.USERS import users

logger = logging.getLogger("claims.claims")


def _claim_path(claim_id: str) -> str:
    return store.build_path(store.CLAIMS, claim_id)


async def get_claim(claim_id: str) -> Optional[Claim]:
    doc = await store.get_document(_claim_path(claim_id))
    if doc is None:
        return None
    return Claim.from_doc(doc)


async def add_claim(org_id: str, item_id: str, user_id: str, evidence: Optional[str] = None) -> str:
    item = await items.get_display_item(org_id, item_id)
    if item is None:
        raise NotFoundError("Item not found")
    user = await users.get_user(user_id)

    data: Dict[str, Any] = {
        "ClaimRef": items.item_reference(org_id, item_id),
        "ClaimUser": store.document(store.user_path(user_id)),
        "OrgId": org_id,
        "ItemId": item_id,
        "ClaimEvidence": evidence or "",
        "userName": (user.display_name or user.email) if user else None,
        "userEmail": user.email if user else None,
        "itemName": item.name,
        "itemLocation": item.location,
    }
    claim_id = await store.add_document(store.CLAIMS, data)
    logger.info("add_claim: user=%s claimed Organizations/%s/Items/%s as Claims/%s", user_id, org_id, item_id, claim_id)
    return claim_id


async def list_claims_for_item(org_id: str, item_id: str) -> List[Claim]:
    docs = await store.list_documents(store.CLAIMS, [("OrgId", "==", org_id), ("ItemId", "==", item_id)])
    return _oldest_first(Claim.from_doc(doc) for doc in docs)


async def list_claims_for_user(user_id: str) -> List[Claim]:
    """The claimant's history; each entry says whether the item still exists."""
    user_ref = store.document(store.user_path(user_id))
    docs = await store.list_documents(store.CLAIMS, [("ClaimUser", "==", user_ref)])
    claims = []
    for doc in docs:
        claim = Claim.from_doc(doc)
        ref = doc.get("ClaimRef")
        if ref is not None:
            claim.item_available = await store.resolve_reference(ref) is not None
        else:
            claim.item_available = False
        if not claim.item_available:
            logger.info("list_claims_for_user: Claims/%s points at a missing item", claim.id)
        claims.append(claim)
    return _oldest_first(claims)


def _oldest_first(claims) -> List[Claim]:
    return sorted(claims, key=lambda c: c.created_at.timestamp() if c.created_at else 0)


async def update_claim(claim_id: str, updates: Dict[str, Any]) -> None:
    await store.update_document(_claim_path(claim_id), updates)


async def answer_claim(claim_id: str, answer: str) -> None:
    await update_claim(claim_id, {"ClaimAnswer": answer})


async def delete_claim(claim_id: str) -> None:
    await store.delete_document(_claim_path(claim_id))
