"""
Unit tests for the course repository and composition root.
"""

import pytest

from config import Settings
from pocketlearn.app import create_repository, create_session, open_repository
from pocketlearn.catalog.repository import CourseRepository, lessons_filter, quote_filter_value
from pocketlearn.core.errors import ConfigError, RecordNotFoundError, UnauthorizedError
from pocketlearn.core.record_client import CollectionClient
from tests.helpers import HOST, make_response


@pytest.fixture
def repository(client, backend, course_record, lesson_records):
    backend.collections["Courses"] = [
        course_record,
        dict(course_record, id="c2", Judul="Forex Dasar", Bahasa="ID", Banner=""),
    ]
    backend.collections["Lesson"] = lesson_records
    return CourseRepository(client)


class TestFilterExpression:
    def test_lessons_filter(self):
        assert lessons_filter("abc123") == 'Courses_ID="abc123"'

    def test_quotes_are_escaped(self):
        assert quote_filter_value('a"b\\c') == '"a\\"b\\\\c"'


class TestCourseRepository:
    """Tests for typed reads."""

    @pytest.mark.asyncio
    async def test_list_courses(self, repository):
        courses = await repository.list_courses()

        assert [course.title for course in courses] == ["Intro to Forex", "Forex Dasar"]
        assert courses[0].banner_url == f"{HOST}/api/files/col_courses/c1/banner_abc.jpeg"

    @pytest.mark.asyncio
    async def test_each_call_refetches(self, repository, backend):
        first = await repository.list_courses()
        second = await repository.list_courses()

        assert first == second
        assert first is not second
        assert len(backend.get_calls) == 2

    @pytest.mark.asyncio
    async def test_get_course(self, repository):
        course = await repository.get_course("c2")
        assert course.language == "ID"

    @pytest.mark.asyncio
    async def test_get_missing_course(self, repository):
        with pytest.raises(RecordNotFoundError):
            await repository.get_course("missing")

    @pytest.mark.asyncio
    async def test_empty_course_id_is_not_found(self, repository, backend):
        with pytest.raises(RecordNotFoundError):
            await repository.get_course("")
        assert backend.get_calls == []

    @pytest.mark.asyncio
    async def test_complete_lists_are_not_truncated(self, repository):
        courses = await repository.list_courses()
        detail = await repository.get_course_detail("c1")

        assert courses.truncated is False
        assert detail.lessons_truncated is False

    @pytest.mark.asyncio
    async def test_capped_lists_report_truncation(self, session, backend, course_record, lesson_records):
        backend.collections["Courses"] = [course_record, dict(course_record, id="c2")]
        backend.collections["Lesson"] = lesson_records
        repository = CourseRepository(CollectionClient(session, page_size=2, max_records=2))

        courses = await repository.list_courses()
        lessons = await repository.list_lessons("c1")
        detail = await repository.get_course_detail("c1")

        assert courses.truncated is False
        assert lessons.truncated is True
        assert [lesson.order for lesson in lessons] == [1, 3]
        assert detail.lessons_truncated is True

    @pytest.mark.asyncio
    async def test_list_lessons_ordered_for_course(self, repository, backend):
        lessons = await repository.list_lessons("c1")

        assert [lesson.id for lesson in lessons] == ["l1", "l2", "l3"]
        assert lessons[1].content == ""
        _, params = backend.get_calls[0]
        assert params["filter"] == 'Courses_ID="c1"'

    @pytest.mark.asyncio
    async def test_course_detail(self, repository, backend):
        detail = await repository.get_course_detail("c1")

        assert detail.course.id == "c1"
        assert [lesson.order for lesson in detail.lessons] == [1, 2, 3]
        assert backend.auth_calls == 1

    @pytest.mark.asyncio
    async def test_unauthorized_propagates(self, session, client, monkeypatch):
        async def mock_post(url, **kwargs):
            return make_response("POST", url, 400, json={})

        monkeypatch.setattr(session.client, "post", mock_post)

        with pytest.raises(UnauthorizedError):
            await CourseRepository(client).list_courses()


class TestComposition:
    """Tests for building the object graph from settings."""

    def make_settings(self, **overrides):
        values = {"db_host": "https://pb.example.com/", "db_user": "svc@example.com", "db_pass": "pw"}
        values.update(overrides)
        return Settings(**values)

    def test_missing_backend_settings_fail_fast(self):
        with pytest.raises(ConfigError) as exc_info:
            create_session(Settings())

        assert "DB_HOST" in exc_info.value.message
        assert "DB_USER" in exc_info.value.message
        assert "DB_PASS" in exc_info.value.message

    def test_one_missing_value(self):
        with pytest.raises(ConfigError) as exc_info:
            create_repository(self.make_settings(db_pass=""))
        assert exc_info.value.message.startswith("Environment variables DB_PASS ")

    @pytest.mark.asyncio
    async def test_repository_wiring(self):
        settings = self.make_settings(max_records=50, page_size=25)
        repository = create_repository(settings)

        assert repository.host == "https://pb.example.com"
        assert repository.client.max_records == 50
        assert repository.client.page_size == 25
        assert repository.client.session.host == "https://pb.example.com"
        await repository.client.session.aclose()

    def test_shared_session(self):
        settings = self.make_settings()
        session = create_session(settings)

        first = create_repository(settings, session)
        second = create_repository(settings, session)

        assert first.client.session is second.client.session

    @pytest.mark.asyncio
    async def test_open_repository_closes_connection(self):
        async with open_repository(self.make_settings()) as repository:
            http_client = repository.client.session.client

        assert http_client.is_closed
