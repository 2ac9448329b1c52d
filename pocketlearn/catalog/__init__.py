"""Catalog domain: courses, lessons, and the client-side filters over them."""

from pocketlearn.catalog.filters import (
    CatalogView,
    available_languages,
    filter_courses,
    order_lessons,
)
from pocketlearn.catalog.mapper import map_course, map_courses, map_lesson, map_lessons
from pocketlearn.catalog.models import Course, CourseDetail, Lesson, Listing
from pocketlearn.catalog.repository import CourseRepository

__all__ = [
    "CatalogView",
    "Course",
    "CourseDetail",
    "CourseRepository",
    "Lesson",
    "Listing",
    "available_languages",
    "filter_courses",
    "map_course",
    "map_courses",
    "map_lesson",
    "map_lessons",
    "order_lessons",
]
