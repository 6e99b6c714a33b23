"""
Reporter - Human-readable reports for the CLI.
"""

import logging
import sys
from typing import List, Optional, TextIO

from .cache_config import CacheConfig
from .cache_stats import CacheStats
from .generation_stats import GenerationStats
from .image_record import ImageInfo


class Reporter:
    """
    Prints summaries of cache state, folder listings and warm-up runs.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_bytes(self, bytes_val: int) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_cache_stats(self, stats: CacheStats, config: CacheConfig) -> None:
        """Print the cache summary."""
        self._print("=" * 60)
        self._print("THUMBNAIL CACHE SUMMARY")
        self._print("=" * 60)
        self._print()
        self._print(f"  Directory:   {config.cache_dir}")
        self._print(f"  Expiry:      {self._format_duration(config.expiry_seconds)}")
        self._print()
        self._print(f"  Total Entries:     {stats.total_entries:>10,}")
        self._print(f"  Valid Entries:     {stats.valid_entries:>10,}  ({stats.valid_ratio:.1f}%)")
        self._print(f"  Stale or Corrupt:  {stats.stale_entries:>10,}")
        self._print()

    def report_folder(self, folder: str, images: List[ImageInfo], skipped: List[str]) -> None:
        """Print a folder listing."""
        self._print("=" * 60)
        self._print(f"FOLDER: {folder}")
        self._print("=" * 60)
        self._print()

        if not images:
            self._print("  No images found.")
        for info in images:
            self._print(f"  {info.format_status()}")

        total_bytes = sum(info.size for info in images)
        self._print()
        self._print(f"  Images:   {len(images):>8,}  ({self._format_bytes(total_bytes)})")
        self._print(f"  Skipped:  {len(skipped):>8,}")
        for path in skipped:
            self._print(f"    - {path}")
        self._print()

    def report_generation(self, stats: GenerationStats) -> None:
        """Print the result of a warm-up run."""
        self._print()
        self._print(f"Generated: {stats.generated}  ({self._format_bytes(stats.payload_chars)} base64)")
        self._print(f"Cached:    {stats.cache_hits}  ({stats.hit_ratio:.1f}% hit ratio)")
        if stats.planned:
            self._print(f"Planned:   {stats.planned}")
        self._print(f"Failed:    {stats.failed}")
        if stats.remaining > 0:
            self._print(f"Not run:   {stats.remaining}")
        self._print(f"Time:      {self._format_duration(stats.elapsed_seconds)}")
        self._print(f"Rate:      {stats.generated_per_minute:.1f}/min")
        for detail in stats.error_details:
            self._print(f"  ! {detail}")
