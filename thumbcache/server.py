"""
HTTP surface for the viewer front end, built on bottle.

Every route answers JSON. Failures come back as ``{"error": message}``
with a status code chosen from the exception type.
"""

import json
import logging
import time
from functools import wraps

from bottle import Bottle, HTTPResponse, Response, request, response

from .errors import (
    DecodeError,
    FileIOError,
    NotFoundError,
    PermissionDeniedError,
    ThumbcacheError,
    UnsupportedFormatError,
)
from .image_service import ImageService

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: 404,
    UnsupportedFormatError: 415,
    DecodeError: 422,
    PermissionDeniedError: 403,
    FileIOError: 500,
}


def str2bool(value, raise_exc=False):
    """converts diverse string values into boolean True or False."""
    true_set = {'yes', 'true', 't', 'y', '1'}
    false_set = {'no', 'false', 'f', 'n', '0'}

    if isinstance(value, str):
        value = value.lower()
        if value in true_set:
            return True
        if value in false_set:
            return False

    if raise_exc:
        raise ValueError('Expected "%s"' % '", "'.join(true_set | false_set))
    return None


def json_error(status, message):
    """Build a JSON error response."""
    return HTTPResponse(
        body=json.dumps({'error': message}),
        status=status,
        headers={'Content-Type': 'application/json'},
    )


def report_errors(func):
    """Decorate a view function to turn cache errors into JSON error responses."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ThumbcacheError as e:
            status = ERROR_STATUS.get(type(e), 500)
            logger.warning(f"{request.method} {request.path} failed ({status}): {e}")
            return json_error(status, str(e))
        except ValueError as e:
            return json_error(400, str(e))
    return wrapper


def include_timestamp(func):
    """Decorate a view function to include the X-Timestamp header to help clients
    maintain time synchronization.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        result = func(*args, **kwargs)
        (result if isinstance(result, Response) else response) \
            .set_header('X-Timestamp', str(int(time.time())))
        return result
    return wrapper


def allow_cross_origin(func):
    """Decorate a view function to allow cross domain access."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
        except HTTPResponse as r:
            r.set_header('Access-Control-Allow-Origin', '*')
            raise
        (result if isinstance(result, Response) else response) \
            .set_header('Access-Control-Allow-Origin', '*')
        return result
    return wrapper


def query_path():
    path = request.query.path
    if not path:
        raise ValueError("Missing 'path' parameter")
    return path


def query_size():
    """Optional integer 'size' parameter; None when absent."""
    size = request.query.size
    if not size:
        return None
    try:
        return int(size)
    except ValueError:
        raise ValueError(f"Invalid size: {size!r}")


def create_app(service: ImageService) -> Bottle:
    """Build the bottle application around an ImageService."""
    app = Bottle()

    @app.route('/')
    def main_page():
        return 'Thumbnail cache server'

    @app.route('/folder')
    @allow_cross_origin
    @report_errors
    def folder_images():
        """List the images in a folder."""
        images = service.get_folder_images(query_path())
        return {'images': [info.to_dict() for info in images], 'count': len(images)}

    @app.route('/image')
    @allow_cross_origin
    @report_errors
    def full_image():
        """Return a full-size image as base64 with its dimensions."""
        path = query_path()
        data = service.load_full_image(path)
        result = data.to_dict()
        result['content_type'] = service.generator.get_content_type('.' + data.format)
        return result

    @app.route('/thumbnail')
    @allow_cross_origin
    @include_timestamp
    @report_errors
    def thumbnail():
        """Return a thumbnail, generating and caching it on a miss."""
        force = str2bool(request.query.force) or False
        result = service.get_or_create_thumbnail(query_path(), query_size(), force_regenerate=force)
        return result.to_dict()

    @app.route('/thumbnail/cached')
    @allow_cross_origin
    @report_errors
    def cached_thumbnail():
        """Return the cached thumbnail only; never generates."""
        return {'thumbnail': service.get_cached_thumbnail_only(query_path(), query_size())}

    @app.route('/validate')
    @allow_cross_origin
    @report_errors
    def validate():
        return {'valid': service.validate_image_file(query_path())}

    @app.route('/cache/clear', method='POST')
    @allow_cross_origin
    @report_errors
    def clear_cache():
        """Sweep expired and corrupt entries."""
        return {'removed': service.clear_expired_cache()}

    @app.route('/cache/stats')
    @allow_cross_origin
    @report_errors
    def cache_stats():
        return service.get_cache_stats().to_dict()

    return app


def run_server(service: ImageService, host: str = '127.0.0.1', port: int = 8765, debug: bool = False) -> None:
    """Serve the app with bottle's built-in server until interrupted."""
    from bottle import run

    logger.info(f"running server on {host}:{port}...")
    run(app=create_app(service), host=host, port=port, debug=debug, quiet=not debug)
    logger.info("Exiting.")
