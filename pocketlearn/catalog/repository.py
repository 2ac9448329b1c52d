"""
Course repository.

Reads behind the two catalog screens: the course list, and one course with
its lessons. Every call goes to the backend; nothing is cached here, the
caller owns the returned lists.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from pocketlearn.core.record_client import CollectionClient

from .filters import order_lessons
from .mapper import LESSON_COURSE, map_course, map_courses, map_lessons
from .models import Course, CourseDetail, Lesson, Listing

COURSES_COLLECTION = "Courses"
LESSONS_COLLECTION = "Lesson"


def quote_filter_value(value: str) -> str:
    """Quote a string literal for a filter expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def lessons_filter(course_id: str) -> str:
    return f"{LESSON_COURSE}={quote_filter_value(course_id)}"


class CourseRepository:
    """Typed reads of courses and lessons."""

    def __init__(self, client: CollectionClient, host: str | None = None):
        self.client = client
        self.host = host or client.host

    async def list_courses(self) -> Listing[Course]:
        records = await self.client.fetch_collection(COURSES_COLLECTION)
        courses = Listing(map_courses(records, self.host), truncated=records.truncated)
        logger.debug("Loaded {} courses", len(courses))
        return courses

    async def get_course(self, course_id: str) -> Course:
        record = await self.client.fetch_record(COURSES_COLLECTION, course_id)
        return map_course(record, self.host)

    async def list_lessons(self, course_id: str) -> Listing[Lesson]:
        """Lessons of one course in display order."""
        records = await self.client.fetch_collection(
            LESSONS_COLLECTION, lessons_filter(course_id)
        )
        return Listing(order_lessons(map_lessons(records)), truncated=records.truncated)

    async def get_course_detail(self, course_id: str) -> CourseDetail:
        """Fetch a course and its lessons concurrently."""
        course, lessons = await asyncio.gather(
            self.get_course(course_id),
            self.list_lessons(course_id),
        )
        return CourseDetail(course=course, lessons=tuple(lessons), lessons_truncated=lessons.truncated)
