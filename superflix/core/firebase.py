import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional

import firebase_admin
from fastapi import Depends
from firebase_admin import credentials, firestore_async
from google.auth.credentials import AnonymousCredentials

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmulatorCredential(credentials.Base):
    """The Firestore emulator accepts unauthenticated clients."""

    def get_credential(self):
        return AnonymousCredentials()


@lru_cache(maxsize=None)
def _client(project_id: str, creds_path: Optional[str], emulator_host: str):
    try:
        app = firebase_admin.get_app(project_id)
    except ValueError:
        if creds_path:
            cred = credentials.Certificate(creds_path)
        else:
            os.environ.setdefault("FIRESTORE_EMULATOR_HOST", emulator_host)
            cred = EmulatorCredential()
            logger.info(f"No Firebase credentials configured, using emulator at {emulator_host}")
        app = firebase_admin.initialize_app(cred, {"projectId": project_id}, name=project_id)
    return firestore_async.client(app)


def client_for(settings: Settings):
    """Async Firestore client for the configured project."""
    creds_path = settings.FIREBASE_CREDS_PATH_ABSOLUTE
    return _client(
        settings.FIREBASE_PROJECT_ID,
        str(creds_path) if creds_path else None,
        settings.FIRESTORE_EMULATOR_HOST,
    )


def get_db(settings: Settings = Depends(get_settings)):
    return client_for(settings)


def snapshot_to_document(snapshot) -> Dict[str, Any]:
    """Flatten a document snapshot into a dict carrying its id as ``_id``."""
    data = snapshot.to_dict() or {}
    data["_id"] = snapshot.id
    return data
