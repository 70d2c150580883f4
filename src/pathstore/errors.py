from __future__ import annotations

from google.api_core.exceptions import GoogleAPICallError


class PathStoreError(ValueError):
    """Base error for requests rejected before reaching Firestore."""


class InvalidPathError(PathStoreError):
    """Raised when a path is empty or contains an empty segment."""


class DocumentRequiredError(PathStoreError):
    """Raised when delete/update targets a collection path."""


class InvalidQueryError(PathStoreError):
    """Raised when filters are supplied for a single-document path."""


# Errors raised by the Firestore client are propagated as-is.
BackendError = GoogleAPICallError
