"""
Scanner - Lists the viewable images in a folder.
"""

import logging
import os
import time
from typing import List, Optional

from .errors import NotFoundError, ThumbcacheError, from_os_error
from .format_detector import FormatDetector
from .image_record import ImageInfo
from .scanner_progress import ScannerProgress


class Scanner:
    """
    Scans a single folder (no recursion) and produces image descriptors.

    Files with an image extension whose header fails validation are
    skipped rather than reported as errors. A scan keeps no state on the
    instance, so one Scanner can serve concurrent requests.
    """

    def __init__(
        self,
        detector: Optional[FormatDetector] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize scanner.

        Args:
            detector: Format detector (default: a new FormatDetector)
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.detector = detector or FormatDetector(self.logger)

    def scan(
        self,
        folder: str,
        progress: Optional[ScannerProgress] = None,
        skipped: Optional[List[str]] = None
    ) -> List[ImageInfo]:
        """
        Scan a folder for images.

        Args:
            folder: Folder path
            progress: Optional progress tracker for callbacks
            skipped: Optional list that receives the paths of rejected files

        Returns:
            Descriptors sorted by filename

        Raises:
            NotFoundError: folder does not exist or is not a directory
        """
        if not os.path.isdir(folder):
            raise NotFoundError(f"Invalid folder path: {folder}")

        start_time = time.time()
        if skipped is None:
            skipped = []
        images: List[ImageInfo] = []

        if progress:
            progress.on_folder_start(folder)

        try:
            with os.scandir(folder) as it:
                entries = [entry for entry in it if entry.is_file()]
        except OSError as e:
            raise from_os_error(e, folder) from e

        for entry in entries:
            if not self.detector.is_supported(entry.name):
                continue

            try:
                info = self.describe(entry.path)
            except ThumbcacheError as e:
                skipped.append(entry.path)
                if progress:
                    progress.on_file_skipped(entry.path, str(e))
                else:
                    self.logger.debug(f"Skipping {entry.name}: {e}")
                continue

            images.append(info)
            if progress:
                progress.on_file_scanned(info)

        images.sort(key=lambda info: info.filename)

        if progress:
            progress.on_folder_complete(folder, len(images), len(skipped))

        self.logger.debug(
            f"Scan of {folder} complete: {len(images)} images, "
            f"{len(skipped)} skipped ({time.time() - start_time:.2f}s)"
        )
        return images

    def describe(self, path: str) -> ImageInfo:
        """
        Build a descriptor for one file, validating its header first.

        Raises:
            NotFoundError, UnsupportedFormatError, PermissionDeniedError, FileIOError
        """
        try:
            stat = os.stat(path)
        except OSError as e:
            raise from_os_error(e, path) from e

        self.detector.validate_header(path)

        filename = os.path.basename(path)
        ext = os.path.splitext(filename)[1].lstrip('.').lower() or 'unknown'

        return ImageInfo(
            path=path,
            filename=filename,
            size=stat.st_size,
            modified=int(stat.st_mtime),
            format=ext,
        )
