"""
Unit tests for LocalEpisodeStore file persistence.
"""
import json

import pytest

from podsite.exceptions import StoreError
from podsite.stores import LocalEpisodeStore


class TestLocalPersistence:
    """Test the JSON file mirror"""

    def test_missing_file_starts_empty(self, tmp_path):
        store = LocalEpisodeStore(tmp_path / "episodes.json")

        assert store.is_empty()
        assert store.get_featured_slugs() == []

    def test_writes_survive_a_new_instance(self, tmp_path, make_episode):
        """
        Given: A store backed by a file
        When: Creating and featuring an episode, then reopening the file
        Then: The new instance sees the same catalog
        """
        path = tmp_path / "episodes.json"
        store = LocalEpisodeStore(path)
        store.create(make_episode("costco", transcript="Hello"))
        store.toggle_featured("costco")

        reopened = LocalEpisodeStore(path)

        assert reopened.get_by_slug("costco") == store.get_by_slug("costco")
        assert reopened.get_featured_slugs() == ["costco"]

    def test_file_uses_export_document_shape(self, tmp_path, make_episode):
        path = tmp_path / "nested" / "episodes.json"
        store = LocalEpisodeStore(path)
        store.create(make_episode("costco", short_description="Warehouse club"))

        data = json.loads(path.read_text(encoding="utf-8"))

        assert set(data) == {"episodes", "featuredSlugs"}
        assert data["episodes"][0]["shortDescription"] == "Warehouse club"
        assert data["episodes"][0]["coverImage"] == ""

    def test_corrupt_file_raises_store_error(self, tmp_path):
        path = tmp_path / "episodes.json"
        path.write_text("{not json", encoding="utf-8")
        store = LocalEpisodeStore(path)

        with pytest.raises(StoreError):
            store.list_episodes()

    def test_invalid_record_in_file_raises_store_error(self, tmp_path):
        path = tmp_path / "episodes.json"
        path.write_text(json.dumps({"episodes": [{"slug": "x"}]}), encoding="utf-8")

        with pytest.raises(StoreError):
            LocalEpisodeStore(path).get_by_slug("x")


class TestLocalOrdering:
    """Test storage order of the local backend"""

    def test_create_and_import_keep_insertion_order(self, make_episode):
        store = LocalEpisodeStore()
        store.create(make_episode("a"))
        store.bulk_import([make_episode("b")])
        store.create(make_episode("c"))

        assert [e.slug for e in store.list_episodes().episodes] == ["a", "b", "c"]

    def test_seeded_store_is_not_empty(self, make_episode):
        store = LocalEpisodeStore(episodes=[make_episode("a")], featured_slugs=["a"])

        assert not store.is_empty()
        assert store.get_featured_slugs() == ["a"]


class TestFailedWrites:
    """A write whose file cannot be saved leaves the store unchanged"""

    @pytest.fixture
    def unwritable_store(self, tmp_path, make_episode):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        return LocalEpisodeStore(
            blocker / "episodes.json",
            episodes=[make_episode("kept", title="Kept")],
            featured_slugs=["kept"],
        )

    def test_failed_create_is_not_visible(self, unwritable_store, make_episode):
        """
        Given: A store whose JSON file lives under a regular file
        When: Creating an episode
        Then: StoreError is raised and the episode is not listed afterwards
        """
        with pytest.raises(StoreError):
            unwritable_store.create(make_episode("ghost"))

        assert [e.slug for e in unwritable_store.list_episodes().episodes] == ["kept"]

    def test_failed_update_keeps_old_record(self, unwritable_store, make_episode):
        with pytest.raises(StoreError):
            unwritable_store.update(make_episode("kept", title="Changed"))

        assert unwritable_store.get_by_slug("kept").title == "Kept"

    def test_failed_delete_keeps_record_and_featured(self, unwritable_store):
        with pytest.raises(StoreError):
            unwritable_store.delete("kept")

        assert unwritable_store.get_by_slug("kept").slug == "kept"
        assert unwritable_store.get_featured_slugs() == ["kept"]

    def test_failed_toggle_keeps_featured_list(self, unwritable_store):
        with pytest.raises(StoreError):
            unwritable_store.toggle_featured("kept")

        assert unwritable_store.get_featured_slugs() == ["kept"]
