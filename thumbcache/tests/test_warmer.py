"""Tests for CacheWarmer class."""

import pytest

from thumbcache.errors import DecodeError
from thumbcache.generation_progress import GenerationProgress
from thumbcache.warmer import CacheWarmer


@pytest.fixture
def folder_images(service, images_dir, make_image):
    """Five valid images, listed through the service."""
    for name in ('a.jpg', 'b.jpg', 'c.png', 'd.jpg', 'e.png'):
        make_image(images_dir / name, size=(60, 40))
    return service.get_folder_images(str(images_dir))


def names(images):
    return [i.filename for i in images]


class TestPriorityOrder:
    """Tests for nearest-first ordering."""

    def test_alternates_around_current(self, folder_images):
        """Test next comes before previous at each distance."""
        order = CacheWarmer.priority_order(folder_images, 2)

        assert names(order) == ['c.png', 'd.jpg', 'b.jpg', 'e.png', 'a.jpg']

    def test_from_start(self, folder_images):
        """Test ordering from the first image is a forward walk."""
        order = CacheWarmer.priority_order(folder_images, 0)

        assert names(order) == ['a.jpg', 'b.jpg', 'c.png', 'd.jpg', 'e.png']

    def test_max_range(self, folder_images):
        """Test images beyond the range are left out."""
        order = CacheWarmer.priority_order(folder_images, 2, max_range=1)

        assert names(order) == ['c.png', 'd.jpg', 'b.jpg']

    @pytest.mark.parametrize('index', [-1, 5, 99])
    def test_out_of_range_index(self, folder_images, index):
        """Test an invalid current index yields nothing."""
        assert CacheWarmer.priority_order(folder_images, index) == []

    def test_every_image_once(self, folder_images):
        """Test no image is repeated or dropped."""
        order = CacheWarmer.priority_order(folder_images, 4)

        assert sorted(names(order)) == names(folder_images)


class TestWarm:
    """Tests for warm()."""

    def test_generates_all(self, service, folder_images, logger):
        """Test a cold cache is fully populated."""
        stats = CacheWarmer(service, size=30, logger=logger).warm(folder_images)

        assert stats.queued == 5
        assert stats.generated == 5
        assert stats.failed == 0
        assert stats.payload_chars > 0
        for info in folder_images:
            assert service.get_cached_thumbnail_only(info.path, 30) is not None

    def test_second_run_skips_cached(self, service, folder_images, logger, mocker):
        """Test fresh entries are not regenerated."""
        CacheWarmer(service, size=30, logger=logger).warm(folder_images)
        spy = mocker.spy(service.generator, 'generate_with_dimensions')

        stats = CacheWarmer(service, size=30, logger=logger).warm(folder_images)

        assert stats.cache_hits == 5
        assert stats.generated == 0
        spy.assert_not_called()

    def test_force_regenerates(self, service, folder_images, logger):
        """Test force ignores fresh entries."""
        CacheWarmer(service, size=30, logger=logger).warm(folder_images)

        stats = CacheWarmer(service, size=30, logger=logger).warm(folder_images, force=True)

        assert stats.generated == 5
        assert stats.cache_hits == 0

    def test_dry_run_writes_nothing(self, service, folder_images, cache_dir, logger):
        """Test dry run counts but never decodes or stores."""
        stats = CacheWarmer(service, size=30, dry_run=True, logger=logger).warm(folder_images)

        assert stats.planned == 5
        assert stats.generated == 0
        assert not cache_dir.exists()

    def test_hits_counted_apart_from_generations(self, service, folder_images, logger):
        """Test a partly warm cache splits into hits and new thumbnails."""
        CacheWarmer(service, size=30, logger=logger).warm(folder_images, limit=2)

        stats = CacheWarmer(service, size=30, logger=logger).warm(folder_images)

        assert stats.cache_hits == 2
        assert stats.generated == 3
        assert stats.hit_ratio == 40.0
        assert stats.remaining == 0

    def test_limit(self, service, folder_images, logger):
        """Test the queue is truncated in priority order."""
        warmer = CacheWarmer(service, size=30, logger=logger)

        stats = warmer.warm(folder_images, current_index=2, limit=2)

        assert stats.queued == 2
        assert service.get_cached_thumbnail_only(folder_images[2].path, 30) is not None
        assert service.get_cached_thumbnail_only(folder_images[3].path, 30) is not None
        assert service.get_cached_thumbnail_only(folder_images[0].path, 30) is None

    def test_errors_are_collected(self, service, folder_images, logger, mocker):
        """Test one failing image does not stop the run."""
        original = service.generator.generate_with_dimensions
        bad_path = folder_images[1].path

        def flaky(path, size):
            if path == bad_path:
                raise DecodeError('broken pixels')
            return original(path, size)

        mocker.patch.object(service.generator, 'generate_with_dimensions', side_effect=flaky)

        stats = CacheWarmer(service, size=30, logger=logger).warm(folder_images)

        assert stats.failed == 1
        assert stats.generated == 4
        assert 'broken pixels' in stats.error_details[0]

    def test_stop_before_start(self, service, folder_images, logger):
        """Test a stopped warmer does nothing."""
        warmer = CacheWarmer(service, size=30, logger=logger)
        warmer.stop()

        stats = warmer.warm(folder_images)

        assert stats.queued == 0
        assert stats.handled == 0

    def test_stop_midway(self, service, folder_images, logger):
        """Test stop() halts after the current image."""
        warmer = CacheWarmer(service, size=30, logger=logger)
        progress = GenerationProgress(logger=logger)
        original = progress.on_progress_update

        def stop_after_first(stats):
            original(stats)
            warmer.stop()

        progress.on_progress_update = stop_after_first

        stats = warmer.warm(folder_images, progress=progress)

        assert stats.generated == 1
        assert stats.remaining == 4

    def test_cadence_sleeps_between_generations(self, service, folder_images, logger, mocker):
        """Test the pause is applied only after a generated thumbnail."""
        sleep = mocker.patch('thumbcache.warmer.time.sleep')
        warmer = CacheWarmer(service, size=30, cadence=0.5, logger=logger)

        warmer.warm(folder_images[:2])
        warmer.warm(folder_images[:2])

        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)

    def test_default_size_from_config(self, service, config):
        """Test size falls back to the configured default."""
        assert CacheWarmer(service).size == config.default_size
