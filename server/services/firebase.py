"""Shared firebase-admin initialization for the Firestore-backed services."""

from pathlib import Path
from typing import Any, Optional, Union


def firestore_client(project_id: Optional[str] = None, credentials_path: Optional[Union[Path, str]] = None) -> Any:
    """Initialize the default firebase app once and return a Firestore client."""
    try:
        import firebase_admin
        from firebase_admin import credentials, firestore
    except ImportError:
        raise ImportError("firebase-admin is required for Firestore services. pip install firebase-admin")
    if not firebase_admin._apps:
        opts = {"projectId": project_id} if project_id else None
        if credentials_path:
            cred = credentials.Certificate(str(Path(credentials_path).resolve()))
            firebase_admin.initialize_app(cred, opts)
        else:
            firebase_admin.initialize_app(options=opts)
    return firestore.client()
