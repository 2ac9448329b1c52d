"""Domain models for the course catalog."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Course:
    """One course of the catalog."""

    id: str
    title: str
    description: str
    level: str
    language: str
    banner_url: str


@dataclass(frozen=True)
class Lesson:
    """One lesson of a course; order drives display position."""

    id: str
    course_id: str
    title: str
    content: str
    order: int


class Listing(list, Generic[T]):
    """Courses or lessons of one read; truncated when the record cap cut it short."""

    def __init__(self, items: Iterable[T] = (), *, truncated: bool = False):
        super().__init__(items)
        self.truncated = truncated


@dataclass(frozen=True)
class CourseDetail:
    """A course with its lessons in display order."""

    course: Course
    lessons: tuple[Lesson, ...]
    lessons_truncated: bool = False
