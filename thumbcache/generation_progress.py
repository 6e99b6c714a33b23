"""
GenerationProgress - Tracks and displays warm-up progress.
"""

import logging
from typing import Optional

from .generation_stats import GenerationStats
from .image_record import ImageInfo


class GenerationProgress:
    """
    Tracks and displays warm-up progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 50,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_file_processed(
        self,
        info: ImageInfo,
        success: bool,
        thumb_size: Optional[int] = None,
        error: Optional[str] = None
    ) -> None:
        """
        Called when a file is processed.

        Args:
            info: The image descriptor
            success: Whether generation succeeded
            thumb_size: Size of the generated payload (if success)
            error: Error message (if failed)
        """
        if self.show_files:
            if success:
                size_str = ImageInfo._format_bytes(thumb_size) if thumb_size else "unknown"
                print(f"  [OK] {info.filename} -> thumbnail cached ({size_str})")
            else:
                print(f"  [ERROR] {info.filename} -> {error or 'failed'}")

    def on_file_skipped(self, info: ImageInfo, reason: str) -> None:
        """Called when a file is skipped."""
        if self.show_files:
            print(f"  [SKIP] {info.filename} -> {reason}")

    def on_progress_update(self, stats: GenerationStats) -> None:
        """
        Called after each image to report overall progress.

        Args:
            stats: Current warm-up statistics
        """
        total_done = stats.handled

        if not self.show_files and total_done - self.last_logged >= self.log_interval:
            self.last_logged = total_done
            self.logger.info(
                f"Progress: {stats.generated} generated, {stats.cache_hits} cached, "
                f"{stats.failed} failed ({stats.generated_per_minute:.1f}/min, "
                f"{stats.remaining} left)"
            )

    def on_dry_run(self, info: ImageInfo) -> None:
        """Called in dry-run mode."""
        if self.show_files:
            print(f"  [DRY RUN] {info.filename} -> would generate thumbnail")

    def __call__(self, stats: GenerationStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
