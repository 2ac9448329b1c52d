"""
Client-side derivation over fetched catalog data.

All functions are pure: they never mutate their input and never touch the
network. Filtering is always derived from the caller's unfiltered base list,
never from a previously filtered result.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from .models import Course, Lesson


def _matches_query(course: Course, needle: str) -> bool:
    return needle in course.title.casefold() or needle in course.description.casefold()


def filter_courses(
    base: Sequence[Course],
    query: str = "",
    language: str | None = "",
) -> list[Course]:
    """
    Courses of `base` matching both the search text and the language.

    `query` is a case-insensitive substring of title or description; empty
    matches everything. `language` must equal Course.language exactly; empty
    or None matches everything. Relative order of `base` is kept.
    """
    needle = (query or "").casefold()
    return [
        course
        for course in base
        if (not needle or _matches_query(course, needle))
        and (not language or course.language == language)
    ]


def available_languages(courses: Iterable[Course]) -> list[str]:
    """Distinct non-empty language tags in first-seen order."""
    seen: dict[str, None] = {}
    for course in courses:
        if course.language:
            seen.setdefault(course.language, None)
    return list(seen)


def order_lessons(lessons: Iterable[Lesson]) -> list[Lesson]:
    """Lessons sorted by `order`; ties keep their original relative order."""
    return sorted(lessons, key=lambda lesson: lesson.order)


@dataclass(frozen=True)
class CatalogView:
    """
    Unfiltered catalog plus the current search and language selection.

    Changing either selection returns a new view; `courses` is re-derived
    from the full base each time, so selections never compound.
    """

    base: tuple[Course, ...]
    query: str = ""
    language: str = ""

    @classmethod
    def of(cls, courses: Iterable[Course]) -> CatalogView:
        return cls(base=tuple(courses))

    def with_query(self, query: str) -> CatalogView:
        return replace(self, query=query)

    def with_language(self, language: str | None) -> CatalogView:
        return replace(self, language=language or "")

    @property
    def courses(self) -> list[Course]:
        return filter_courses(self.base, self.query, self.language)

    @property
    def languages(self) -> list[str]:
        return available_languages(self.base)
