"""Core data types for the foodcup application."""

from typing import Any, Dict, Optional, TypedDict  # noqa: UP035


class FirestoreDocument(TypedDict, total=False):
    """Generic Firestore document structure."""

    id: str
    createdAt: Any
    updatedAt: Any


class APIResponse(TypedDict):
    """Generic API response structure."""

    status: str
    message: str
    data: Optional[Dict[str, Any]]  # noqa: UP006
