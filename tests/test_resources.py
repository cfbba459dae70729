"""Tests for kanban.pm.resources module."""

import pytest

from kanban.lib.types import ResourceKind
from kanban.pm.models import Resource
from kanban.pm.resources import ResourcePool


class TestCreate:
    """Tests for ResourcePool.create()."""

    def test_three_of_each_kind(self):
        pool = ResourcePool.create()
        kinds = [r.kind for r in pool.available()]
        assert pool.available_count() == 9
        for kind in ResourceKind:
            assert kinds.count(kind) == 3

    def test_ids_share_one_counter(self):
        """Ids run 1..n across kinds in analyst, developer, tester order."""
        ids = [r.id for r in ResourcePool.create(2).available()]
        assert ids == ["analyst_1", "analyst_2", "developer_3", "developer_4", "tester_5", "tester_6"]

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate resource id"):
            ResourcePool([Resource("a", ResourceKind.ANALYST), Resource("a", ResourceKind.TESTER)])


class TestAllocateRelease:
    """Tests for allocate() and release()."""

    @pytest.fixture
    def pool(self):
        return ResourcePool.create()

    def test_allocate_removes_from_pool(self, pool):
        resource = pool.allocate("developer_5")
        assert resource.kind is ResourceKind.DEVELOPER
        assert not pool.is_available("developer_5")
        assert pool.available_count() == 8

    def test_allocate_unknown(self, pool):
        assert pool.allocate("designer_1") is None
        assert pool.available_count() == 9

    def test_allocate_twice(self, pool):
        """A resource already out of the pool cannot be taken again."""
        assert pool.allocate("tester_7") is not None
        assert pool.allocate("tester_7") is None

    def test_get_finds_allocated_resources(self, pool):
        pool.allocate("analyst_2")
        assert pool.get("analyst_2") == Resource("analyst_2", ResourceKind.ANALYST)
        assert len(pool.all_resources()) == 9

    def test_release_returns_resource(self, pool):
        resource = pool.allocate("analyst_1")
        assert pool.release(resource) is True
        assert pool.is_available("analyst_1")

    def test_release_is_idempotent(self, pool):
        """Releasing twice never duplicates the pool entry."""
        resource = pool.allocate("analyst_1")
        pool.release(resource)
        assert pool.release(resource) is False
        ids = [r.id for r in pool.available()]
        assert ids.count("analyst_1") == 1
        assert pool.available_count() == 9

    def test_available_is_a_copy(self, pool):
        pool.available().clear()
        assert pool.available_count() == 9
