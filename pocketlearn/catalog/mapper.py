"""
Map raw record-store records onto Course and Lesson.

Records are untyped key-value maps whose schema is held only by backend
convention, so every field is read defensively and defaulted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pocketlearn.core.record_client import build_file_url

from .models import Course, Lesson

# Record keys used by the backend collections
COURSE_TITLE = "Judul"
COURSE_DESCRIPTION = "Deskripsi"
COURSE_LEVEL = "Level"
COURSE_LANGUAGE = "Bahasa"
COURSE_BANNER = "Banner"

LESSON_TITLE = "Judul"
LESSON_COURSE = "Courses_ID"
LESSON_CONTENT = "Konten"
LESSON_ORDER = "Urutan"


def _text(raw: Mapping[str, Any], key: str) -> str:
    """String value of a field; missing or null becomes ''."""
    value = raw.get(key)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        # relation and file fields can arrive as lists
        return str(value[0]) if value else ""
    return str(value)


def _integer(raw: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def map_course(raw: Mapping[str, Any], host: str) -> Course:
    """Build a course from a raw `Courses` record."""
    record_id = _text(raw, "id")
    return Course(
        id=record_id,
        title=_text(raw, COURSE_TITLE),
        description=_text(raw, COURSE_DESCRIPTION),
        level=_text(raw, COURSE_LEVEL),
        language=_text(raw, COURSE_LANGUAGE).strip(),
        banner_url=build_file_url(
            host,
            _text(raw, "collectionId"),
            record_id,
            _text(raw, COURSE_BANNER),
        ),
    )


def map_lesson(raw: Mapping[str, Any]) -> Lesson:
    """Build a lesson from a raw `Lesson` record."""
    return Lesson(
        id=_text(raw, "id"),
        course_id=_text(raw, LESSON_COURSE),
        title=_text(raw, LESSON_TITLE),
        content=_text(raw, LESSON_CONTENT),
        order=_integer(raw, LESSON_ORDER),
    )


def map_courses(records: Iterable[Mapping[str, Any]], host: str) -> list[Course]:
    return [map_course(record, host) for record in records]


def map_lessons(records: Iterable[Mapping[str, Any]]) -> list[Lesson]:
    return [map_lesson(record) for record in records]


__all__ = [
    "build_file_url",
    "map_course",
    "map_courses",
    "map_lesson",
    "map_lessons",
]
