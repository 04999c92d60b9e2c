# file: reunitems/core/firebase.py

import os
import json
import logging
import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud import firestore as gcp_firestore

from reunitems.core.config import (
    FIREBASE_PROJECT_ID,
    CREDENTIAL_SOURCE,
    FIRESTORE_EMULATOR_HOST,
)

logger = logging.getLogger("core.firebase")

_app = None
_db = None


def get_app():
    """
    Initialize the Firebase Admin app once and return it.

    GOOGLE_APPLICATION_CREDENTIALS may hold a file path or the raw JSON string.
    """
    global _app
    if _app is not None:
        return _app

    if firebase_admin._apps:
        _app = firebase_admin.get_app()
        return _app

    try:
        if not CREDENTIAL_SOURCE:
            raise ValueError("GOOGLE_APPLICATION_CREDENTIALS env var is not set")

        # Case 1: it's a file path
        if os.path.exists(CREDENTIAL_SOURCE):
            logger.info("Loading Firebase credentials from file: %s", CREDENTIAL_SOURCE)
            cred = credentials.Certificate(CREDENTIAL_SOURCE)
        else:
            # Case 2: it's a raw JSON string
            logger.info("Loading Firebase credentials from raw JSON string")
            cred = credentials.Certificate(json.loads(CREDENTIAL_SOURCE))

        _app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase initialized with project: %s", _app.project_id)
        return _app
    except Exception as e:
        logger.exception("Failed to initialize Firebase: %s", e)
        raise


def get_db():
    """Return the shared Firestore client, creating it on first use."""
    global _db
    if _db is not None:
        return _db

    if FIRESTORE_EMULATOR_HOST:
        # The emulator accepts unauthenticated clients
        _db = gcp_firestore.Client(project=FIREBASE_PROJECT_ID)
        logger.info("Firestore emulator client at %s", FIRESTORE_EMULATOR_HOST)
    else:
        get_app()
        _db = firestore.client()
        logger.info("Firestore client project: %s", _db.project)
    return _db


def set_db(client) -> None:
    """Swap the Firestore client (emulators, tests). Pass None to reset."""
    global _db
    _db = client


__all__ = ["get_app", "get_db", "set_db"]
