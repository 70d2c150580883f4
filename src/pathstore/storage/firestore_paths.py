from __future__ import annotations

from functools import reduce
from typing import Any, NamedTuple

from pathstore.errors import InvalidPathError


class ResolvedPath(NamedTuple):
    """Deepest collection and document reached while walking a path.

    `document` is None until a document id has been consumed. When the path
    ends on a collection, `document` is the parent document of `collection`.
    """

    segments: tuple[str, ...]
    collection: Any
    document: Any | None

    @property
    def addresses_document(self) -> bool:
        return len(self.segments) % 2 == 0


def split_path(path: str) -> tuple[str, ...]:
    if not path:
        raise InvalidPathError("Path must not be empty.")
    segments = tuple(path.split("/"))
    if any(segment == "" for segment in segments):
        raise InvalidPathError(f"Path must not contain empty segments: {path}")
    return segments


def _step(resolved: ResolvedPath, indexed_segment: tuple[int, str]) -> ResolvedPath:
    index, segment = indexed_segment
    if index % 2 == 1:
        return resolved._replace(document=resolved.collection.document(segment))
    return resolved._replace(collection=resolved.document.collection(segment))


def resolve_path(client: Any, path: str) -> ResolvedPath:
    """Turn `a/b/c/...` into lazily built Firestore references.

    No document is fetched; references are constructed only.
    """

    segments = split_path(path)
    initial = ResolvedPath(segments=segments, collection=client.collection(segments[0]), document=None)
    return reduce(_step, enumerate(segments[1:], start=1), initial)
