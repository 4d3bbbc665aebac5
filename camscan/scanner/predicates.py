"""Reusable scan predicates."""

from typing import Iterable, Optional

from ..models.common import FileSystemItem
from .request import Predicate


def files_only(item: FileSystemItem) -> bool:
    return item.is_file


def known_images(item: FileSystemItem) -> bool:
    """Images, plus files whose metadata the camera hasn't loaded yet (probably images too)."""
    return item.is_file and (item.is_known_image_type or not item.metadata_loaded)


def match_extensions(*extensions: str) -> Predicate:
    normalized = frozenset(ext.lower().lstrip(".") for ext in extensions)

    def predicate(item: FileSystemItem) -> bool:
        return item.is_file and item.extension in normalized

    return predicate


def name_contains(text: str) -> Predicate:
    needle = text.lower()

    def predicate(item: FileSystemItem) -> bool:
        return needle in item.name.lower()

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(item: FileSystemItem) -> bool:
        return all(p(item) for p in predicates)

    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    def predicate(item: FileSystemItem) -> bool:
        return any(p(item) for p in predicates)

    return predicate


def predicate_from_filters(
    extensions: Iterable[str] = (),
    images_only: bool = False,
    name_text: Optional[str] = None,
) -> Optional[Predicate]:
    """Build a predicate from API-style filters. None when nothing is filtered."""
    parts: list[Predicate] = []
    extensions = list(extensions)
    if extensions:
        parts.append(match_extensions(*extensions))
    if images_only:
        parts.append(known_images)
    if name_text:
        parts.append(name_contains(name_text))
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return all_of(*parts)
