"""Tests for CacheJanitor class."""

import pytest

from thumbcache.cache_entry import CacheEntry
from thumbcache.janitor import CacheJanitor


@pytest.fixture
def janitor(store, logger):
    return CacheJanitor(store, logger=logger)


def fill(store, clock, fresh=0, expired=0, corrupt=0):
    """Populate the store with entries of each kind."""
    for i in range(expired):
        store.put(f"e{i:031d}", CacheEntry(thumbnail='old'))
    clock.advance(86401)
    for i in range(fresh):
        store.put(f"f{i:031d}", CacheEntry(thumbnail='new'))
    for i in range(corrupt):
        store.path_for(f"c{i:031d}").write_text('{broken')


class TestSweep:
    """Tests for sweep()."""

    def test_missing_directory(self, janitor, cache_dir):
        """Test sweeping a cache that does not exist."""
        assert janitor.sweep() == 0
        assert not cache_dir.exists()

    def test_removes_expired_and_corrupt(self, janitor, store, clock):
        """Test the return value counts every removed file."""
        store.ensure_directory()
        fill(store, clock, fresh=2, expired=3, corrupt=1)

        assert janitor.sweep() == 4
        assert len(list(store.entry_paths())) == 2

    def test_idempotent(self, janitor, store, clock):
        """Test a second sweep finds nothing to remove."""
        store.ensure_directory()
        fill(store, clock, fresh=1, expired=2)

        janitor.sweep()

        assert janitor.sweep() == 0

    def test_keeps_fresh_entries_readable(self, janitor, store, clock):
        """Test fresh entries survive and still read back."""
        store.ensure_directory()
        fill(store, clock, fresh=1, expired=1)

        janitor.sweep()

        assert store.get(f"f{0:031d}").thumbnail == 'new'

    def test_unreadable_entry_skipped(self, janitor, store, clock, mocker):
        """Test one unreadable file does not stop the sweep."""
        store.ensure_directory()
        fill(store, clock, expired=2)
        original = store.read_entry
        calls = []

        def flaky(path):
            calls.append(path)
            if len(calls) == 1:
                raise PermissionError('denied')
            return original(path)

        mocker.patch.object(store, 'read_entry', side_effect=flaky)

        assert janitor.sweep() == 1
        assert len(calls) == 2

    def test_logs_count(self, janitor, store, clock, caplog):
        """Test the sweep reports how many entries it removed."""
        store.ensure_directory()
        fill(store, clock, expired=2)

        with caplog.at_level('INFO', logger='test'):
            janitor.sweep()

        assert 'Cleaned 2 old cache entries' in caplog.text


class TestStats:
    """Tests for stats()."""

    def test_empty(self, janitor):
        """Test stats on a missing directory."""
        stats = janitor.stats()

        assert stats.total_entries == 0
        assert stats.valid_entries == 0

    def test_counts_without_removing(self, janitor, store, clock):
        """Test stats classify entries but leave them on disk."""
        store.ensure_directory()
        fill(store, clock, fresh=2, expired=1, corrupt=1)

        stats = janitor.stats()

        assert stats.total_entries == 4
        assert stats.valid_entries == 2
        assert stats.stale_entries == 2
        assert len(list(store.entry_paths())) == 4
