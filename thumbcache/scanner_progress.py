"""
ScannerProgress - Tracks and displays folder scan progress.
"""

import logging
import time
from typing import Optional

from .image_record import ImageInfo


class ScannerProgress:
    """
    Tracks and displays scan progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 500,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's scanned
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.scanned = 0
        self.skipped = 0
        self.start_time: Optional[float] = None

    def on_folder_start(self, folder: str) -> None:
        """Called when starting to scan a folder."""
        self.start_time = time.time()
        if self.show_files:
            print(f"\n=== Scanning folder: {folder} ===")
        else:
            self.logger.info(f"Scanning folder: {folder}")

    def on_file_scanned(self, info: ImageInfo) -> None:
        """
        Called when an image is accepted.

        Args:
            info: Descriptor of the accepted image
        """
        if self.start_time is None:
            self.start_time = time.time()

        self.scanned += 1

        if self.show_files:
            print(f"  [OK] {info.format_status()}")
        elif self.scanned % self.log_interval == 0:
            elapsed = time.time() - self.start_time
            rate = self.scanned / elapsed if elapsed > 0 else 0
            self.logger.info(f"  Progress: {self.scanned:,} images ({rate:.0f}/sec)")

    def on_file_skipped(self, path: str, reason: str) -> None:
        """Called when a file with an image extension fails validation."""
        self.skipped += 1
        if self.show_files:
            print(f"  [SKIP] {path} -> {reason}")

    def on_folder_complete(self, folder: str, found: int, skipped: int) -> None:
        """Called when a folder scan is complete."""
        if self.show_files:
            print(f"--- {folder}: {found} images, {skipped} skipped ---")
        else:
            self.logger.info(f"  Folder {folder}: {found} images, {skipped} skipped")

    def __call__(self, info: ImageInfo) -> None:
        """Allow use as callback."""
        self.on_file_scanned(info)
