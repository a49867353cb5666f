"""Tests for the page resolver."""

import pytest

from app.resolver import PageResolver


@pytest.fixture
def resolver(fake_store, test_settings):
    """Create resolver over the fake store."""
    return PageResolver(fake_store, test_settings)


class TestFindTaskPage:
    """Test task page lookup."""

    @pytest.mark.asyncio
    async def test_finds_by_id_prefix(self, resolver, fake_store):
        """Page title starting with the id is found."""
        page_id = fake_store.add_page("task-db", "ABC-12 Login button does nothing")

        page = await resolver.find_task_page("ABC-12")

        assert page is not None
        assert page.id == page_id
        assert fake_store.queries == [("task-db", "starts_with", "ABC-12")]

    @pytest.mark.asyncio
    async def test_not_found(self, resolver):
        """No matching page gives None."""
        assert await resolver.find_task_page("ABC-12") is None

    @pytest.mark.asyncio
    async def test_longer_id_is_not_a_match(self, resolver, fake_store):
        """ABC-1 does not match the page of ABC-12."""
        fake_store.add_page("task-db", "ABC-12 Other task")
        assert await resolver.find_task_page("ABC-1") is None

    @pytest.mark.asyncio
    async def test_case_sensitive_recheck(self, resolver, fake_store):
        """Remote case-insensitive hits are filtered locally."""
        fake_store.add_page("task-db", "abc-12 lowercase copy")
        assert await resolver.find_task_page("ABC-12") is None

    @pytest.mark.asyncio
    async def test_returns_first_match(self, resolver, fake_store):
        """With duplicates the first page wins."""
        first = fake_store.add_page("task-db", "ABC-12 First")
        fake_store.add_page("task-db", "ABC-12 Duplicate")

        page = await resolver.find_task_page("ABC-12")

        assert page.id == first

    @pytest.mark.asyncio
    async def test_bare_id_title(self, resolver, fake_store):
        """A title that is exactly the id matches."""
        page_id = fake_store.add_page("task-db", "ABC-12")
        assert (await resolver.find_task_page("ABC-12")).id == page_id

    @pytest.mark.asyncio
    async def test_lookup_failure_is_absent(self, resolver, fake_store):
        """Store failure is downgraded to not found."""
        fake_store.add_page("task-db", "ABC-12 Exists")
        fake_store.fail_queries = True

        assert await resolver.find_task_page("ABC-12") is None


class TestFindProjectPage:
    """Test project page lookup."""

    @pytest.mark.asyncio
    async def test_finds_by_containment(self, resolver, fake_store):
        """Project title containing the name is found."""
        page_id = fake_store.add_page("project-db", "[VN] Mobile App 2026")

        page = await resolver.find_project_page("Mobile App")

        assert page.id == page_id
        assert fake_store.queries == [("project-db", "contains", "Mobile App")]

    @pytest.mark.asyncio
    async def test_searches_project_database_only(self, resolver, fake_store):
        """Task pages are not considered projects."""
        fake_store.add_page("task-db", "ABC-1 Mobile App crash")
        assert await resolver.find_project_page("Mobile App") is None

    @pytest.mark.asyncio
    async def test_case_sensitive_recheck(self, resolver, fake_store):
        """Containment is re-checked case-sensitively."""
        fake_store.add_page("project-db", "mobile app")
        assert await resolver.find_project_page("Mobile App") is None

    @pytest.mark.asyncio
    async def test_lookup_failure_is_absent(self, resolver, fake_store):
        """Store failure is downgraded to not found."""
        fake_store.add_page("project-db", "Mobile App")
        fake_store.fail_queries = True

        assert await resolver.find_project_page("Mobile App") is None
