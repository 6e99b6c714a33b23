"""
Command Line Interface for the thumbnail cache.
"""

import argparse
import base64
import logging
from pathlib import Path
from typing import List, Optional

from .cache_config import CacheConfig
from .errors import ThumbcacheError
from .generation_progress import GenerationProgress
from .image_service import ImageService
from .reporter import Reporter
from .scanner_progress import ScannerProgress
from .warmer import CacheWarmer


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('thumbcache')


def get_config(args: argparse.Namespace) -> CacheConfig:
    """Get cache configuration from environment and CLI overrides."""
    config = CacheConfig.from_env()

    if getattr(args, 'cache_dir', None):
        config.cache_dir = Path(args.cache_dir)
    if getattr(args, 'expiry', None) is not None:
        config.expiry_seconds = args.expiry

    return config


def get_service(args: argparse.Namespace, logger: logging.Logger) -> ImageService:
    """
    Build the image service for a command.

    Raises:
        ValueError: configuration is invalid (errors already logged)
    """
    try:
        config = get_config(args)
    except ValueError as e:
        logger.error(f"Invalid cache configuration: {e}")
        raise

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("Cache configuration invalid")

    if not getattr(args, 'verbose', False):
        logger.setLevel(config.log_level)

    logger.debug(f"Cache directory: {config.cache_dir}")
    return ImageService(config, logger=logger)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add logging and cache location arguments to a parser."""
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    cache_group = parser.add_argument_group('Cache')
    cache_group.add_argument('--cache-dir', metavar='PATH',
                             help='Override the platform cache directory (or THUMBCACHE_DIR)')
    cache_group.add_argument('--expiry', type=int, metavar='SECONDS',
                             help='Override the expiry window (default: 86400)')


def cmd_list(args: argparse.Namespace) -> int:
    """Execute list command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    progress = ScannerProgress(show_files=True, logger=logger) if args.show_files else None

    skipped: List[str] = []
    try:
        images = service.scanner.scan(args.folder, progress=progress, skipped=skipped)
    except ThumbcacheError as e:
        logger.error(f"Scan failed: {e}")
        return 1

    Reporter().report_folder(args.folder, images, skipped)
    return 0


def cmd_thumbnail(args: argparse.Namespace) -> int:
    """Execute thumbnail command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    try:
        result = service.get_or_create_thumbnail(args.path, args.size, force_regenerate=args.force)
    except (ThumbcacheError, ValueError) as e:
        logger.error(f"Failed to generate thumbnail: {e}")
        return 1

    source = "cache" if result.from_cache else "generated"
    logger.info(f"Thumbnail for {args.path} @{result.size} ({source}, created {result.created})")
    if result.width and result.height:
        logger.info(f"Original size: {result.width}x{result.height}")

    if args.output:
        Path(args.output).write_bytes(base64.b64decode(result.thumbnail))
        logger.info(f"Wrote {args.output}")
    else:
        print(result.thumbnail)

    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Execute info command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
        data = service.load_full_image(args.path)
    except ValueError:
        return 1
    except ThumbcacheError as e:
        logger.error(f"Failed to load image: {e}")
        return 1

    print(f"Path:     {data.path}")
    print(f"Format:   {data.format}")
    print(f"Size:     {data.width}x{data.height}")
    print(f"Payload:  {len(data.base64):,} base64 characters")
    return 0


def cmd_warm(args: argparse.Namespace) -> int:
    """Execute warm command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    try:
        images = service.get_folder_images(args.folder)
    except ThumbcacheError as e:
        logger.error(f"Scan failed: {e}")
        return 1

    logger.info(f"Folder: {args.folder} ({len(images)} images)")
    if args.limit:
        logger.info(f"Test mode: limiting to {args.limit} thumbnails")

    warmer = CacheWarmer(
        service,
        size=args.size,
        cadence=args.cadence,
        dry_run=args.dry_run,
        logger=logger
    )

    progress = None
    if not args.quiet:
        progress = GenerationProgress(show_files=args.show_files, logger=logger)

    try:
        stats = warmer.warm(
            images,
            current_index=args.current,
            max_range=args.range,
            force=args.force,
            progress=progress,
            limit=args.limit
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Warm-up failed: {e}")
        return 1

    if not args.quiet:
        Reporter().report_generation(stats)

    return 0 if stats.failed == 0 else 1


def cmd_clean(args: argparse.Namespace) -> int:
    """Execute clean command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    removed = service.clear_expired_cache()
    print(f"Removed {removed} expired or corrupt cache entries")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Execute stats command."""
    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    Reporter().report_cache_stats(service.get_cache_stats(), service.config)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Execute serve command."""
    from .server import run_server

    logger = setup_logging(args.verbose)

    try:
        service = get_service(args, logger)
    except ValueError:
        return 1

    if not args.no_clean:
        service.clear_expired_cache()

    try:
        run_server(service, host=args.host, port=args.port, debug=args.verbose)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='thumbcache',
        description='Thumbnail generation and caching for the photo viewer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  List a folder:        python -m thumbcache list ~/Pictures
  One thumbnail:        python -m thumbcache thumbnail photo.jpg --size 30 -o thumb.jpg
  Warm a folder:        python -m thumbcache warm ~/Pictures --current 10 --range 10
  Cache maintenance:    python -m thumbcache clean
  HTTP API:             python -m thumbcache serve --port 8765
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # List command
    list_parser = subparsers.add_parser('list', help='List the images in a folder')
    list_parser.add_argument('folder', help='Folder to scan')
    list_parser.add_argument('--show-files', action='store_true',
                             help='Print each file as scanned, including skipped ones')
    add_common_arguments(list_parser)

    # Thumbnail command
    thumb_parser = subparsers.add_parser('thumbnail', help='Get or create a cached thumbnail')
    thumb_parser.add_argument('path', help='Image file')
    thumb_parser.add_argument('-s', '--size', type=int, help='Thumbnail size (default: 30)')
    thumb_parser.add_argument('-f', '--force', action='store_true', help='Regenerate even if cached')
    thumb_parser.add_argument('-o', '--output', help='Write the JPEG to a file instead of printing base64')
    add_common_arguments(thumb_parser)

    # Info command
    info_parser = subparsers.add_parser('info', help='Load a full image and show its details')
    info_parser.add_argument('path', help='Image file')
    add_common_arguments(info_parser)

    # Warm command
    warm_parser = subparsers.add_parser('warm', help='Pre-generate thumbnails for a folder')
    warm_parser.add_argument('folder', help='Folder to warm')
    warm_parser.add_argument('-s', '--size', type=int, help='Thumbnail size (default: 30)')
    warm_parser.add_argument('--current', type=int, default=0,
                             help='Index of the image being viewed (default: 0)')
    warm_parser.add_argument('--range', type=int, metavar='N',
                             help='Only warm images within N of the current one')
    warm_parser.add_argument('-c', '--cadence', type=float, default=0.0, help='Seconds between images')
    warm_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    warm_parser.add_argument('-f', '--force', action='store_true', help='Regenerate cached thumbnails')
    warm_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    warm_parser.add_argument('--show-files', action='store_true',
                             help='Print each file as processed with result')
    warm_parser.add_argument('--limit', type=int, metavar='N',
                             help='Limit to N thumbnails (for testing)')
    add_common_arguments(warm_parser)

    # Clean command
    clean_parser = subparsers.add_parser('clean', help='Remove expired and corrupt cache entries')
    add_common_arguments(clean_parser)

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show cache statistics')
    add_common_arguments(stats_parser)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Serve the HTTP API')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Bind address (default: 127.0.0.1)')
    serve_parser.add_argument('--port', type=int, default=8765, help='Port (default: 8765)')
    serve_parser.add_argument('--no-clean', action='store_true',
                              help='Skip the cache sweep at startup')
    add_common_arguments(serve_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'list':
        return cmd_list(parsed_args)
    elif parsed_args.command == 'thumbnail':
        return cmd_thumbnail(parsed_args)
    elif parsed_args.command == 'info':
        return cmd_info(parsed_args)
    elif parsed_args.command == 'warm':
        return cmd_warm(parsed_args)
    elif parsed_args.command == 'clean':
        return cmd_clean(parsed_args)
    elif parsed_args.command == 'stats':
        return cmd_stats(parsed_args)
    elif parsed_args.command == 'serve':
        return cmd_serve(parsed_args)

    return 1
