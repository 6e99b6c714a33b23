"""
CacheWarmer - Pre-generates thumbnails for a folder listing.
"""

import logging
import time
from typing import List, Optional

from .errors import ThumbcacheError
from .generation_progress import GenerationProgress
from .generation_stats import GenerationStats
from .image_record import ImageInfo
from .image_service import ImageService


class CacheWarmer:
    """
    Fills the thumbnail cache for a list of images.

    Images are processed nearest-first around the one being viewed
    (current, +1, -1, +2, -2, ...) so the thumbnails the user is about to
    see are ready first.
    """

    def __init__(
        self,
        service: ImageService,
        size: Optional[int] = None,
        cadence: float = 0.0,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize warmer.

        Args:
            service: Image service used for lookups and generation
            size: Thumbnail size (default: the service's default size)
            cadence: Seconds to pause between images
            dry_run: If True, report what would be generated without decoding
            logger: Optional logger instance
        """
        self.service = service
        self.size = size or service.config.default_size
        self.cadence = cadence
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)
        self.stats = GenerationStats()
        self._stop_requested = False

    def stop(self) -> None:
        """Request the warmer to stop after the current image."""
        self._stop_requested = True

    @staticmethod
    def priority_order(
        images: List[ImageInfo],
        current_index: int,
        max_range: Optional[int] = None
    ) -> List[ImageInfo]:
        """
        Order images by distance from the current one, next before previous.

        Args:
            images: Folder listing
            current_index: Index of the image being viewed
            max_range: Maximum offset to include (None = whole listing)

        Returns:
            Images in processing order (empty if current_index is out of range)
        """
        if not 0 <= current_index < len(images):
            return []

        ordered = [images[current_index]]
        limit = len(images) if max_range is None else max_range

        for offset in range(1, limit + 1):
            after = current_index + offset
            before = current_index - offset
            if after >= len(images) and before < 0:
                break
            if after < len(images):
                ordered.append(images[after])
            if before >= 0:
                ordered.append(images[before])

        return ordered

    def warm(
        self,
        images: List[ImageInfo],
        current_index: int = 0,
        max_range: Optional[int] = None,
        force: bool = False,
        progress: Optional[GenerationProgress] = None,
        limit: Optional[int] = None
    ) -> GenerationStats:
        """
        Generate missing thumbnails for a listing.

        Args:
            images: Folder listing
            current_index: Index of the image being viewed
            max_range: Only warm images within this offset of current_index
            force: Regenerate even when a fresh entry exists
            progress: Optional progress tracker
            limit: Optional limit on number of images to process

        Returns:
            GenerationStats with results
        """
        if self._stop_requested:
            self.logger.info("Stop was requested before warming started")
            self.stats = GenerationStats()
            return self.stats

        queue = self.priority_order(images, current_index, max_range)
        if limit:
            queue = queue[:limit]

        self.stats = GenerationStats(queued=len(queue))

        mode_str = " [DRY RUN]" if self.dry_run else ""
        self.logger.info(f"Starting warm-up: {len(queue)} images @{self.size}{mode_str}")

        for info in queue:
            if self._stop_requested:
                self.logger.info("Stop requested, halting warm-up")
                break

            generated = self._process(info, force, progress)

            if progress:
                progress.on_progress_update(self.stats)

            if generated and self.cadence > 0 and not self.dry_run:
                time.sleep(self.cadence)

        self.logger.info(
            f"Warm-up complete: {self.stats.generated} generated, "
            f"{self.stats.cache_hits} cached, {self.stats.planned} planned, {self.stats.failed} failed "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )

        return self.stats

    def _process(
        self,
        info: ImageInfo,
        force: bool,
        progress: Optional[GenerationProgress]
    ) -> bool:
        """Process a single image. Returns True if a thumbnail was generated."""
        if not force and self.service.get_cached_thumbnail_only(info.path, self.size) is not None:
            self.stats.cache_hits += 1
            if progress:
                progress.on_file_skipped(info, "already cached")
            return False

        if self.dry_run:
            if progress:
                progress.on_dry_run(info)
            else:
                self.logger.info(f"[DRY RUN] Would generate: {info.filename}")
            self.stats.planned += 1
            return False

        try:
            result = self.service.get_or_create_thumbnail(info.path, self.size, force_regenerate=force)
        except ThumbcacheError as e:
            error_msg = f"Error processing {info.filename}: {e}"
            self.logger.error(error_msg)
            self.stats.record_failure(error_msg)
            if progress:
                progress.on_file_processed(info, success=False, error=str(e))
            return False

        self.stats.record_generated(result.thumbnail)

        if progress:
            progress.on_file_processed(info, success=True, thumb_size=len(result.thumbnail))
        else:
            self.logger.debug(
                f"Generated: {info.filename} "
                f"[{self.stats.handled}/{self.stats.queued}]"
            )

        return True
