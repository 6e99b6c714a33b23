"""
Pytest fixtures for thumbcache tests.
"""

import io
import logging

import pytest
from PIL import Image


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def save_image(path, size=(100, 100), color='red', mode='RGB', fmt=None, **params):
    """Write a solid-colour image and return its path as a string."""
    img = Image.new(mode, size, color=color)
    img.save(path, format=fmt, **params)
    return str(path)


@pytest.fixture
def make_image():
    """Fixture providing the image file factory."""
    return save_image


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def clock():
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path):
    """Fixture providing a (not yet created) cache directory."""
    return tmp_path / 'cache'


@pytest.fixture
def config(cache_dir):
    """Fixture providing a cache configuration rooted in tmp_path."""
    from thumbcache.cache_config import CacheConfig

    return CacheConfig(cache_dir=cache_dir, expiry_seconds=86400, default_size=30)


@pytest.fixture
def store(cache_dir, clock, logger):
    """Fixture providing a CacheStore driven by the fake clock."""
    from thumbcache.cache_store import CacheStore

    return CacheStore(cache_dir, expiry_seconds=86400, clock=clock, logger=logger)


@pytest.fixture
def service(config, store, logger):
    """Fixture providing an ImageService backed by the test store."""
    from thumbcache.image_service import ImageService

    return ImageService(config, store=store, logger=logger)


@pytest.fixture
def images_dir(tmp_path):
    """Fixture providing an empty folder for image files."""
    folder = tmp_path / 'images'
    folder.mkdir()
    return folder


@pytest.fixture
def jpeg_file(images_dir):
    """Fixture providing a 100x100 JPEG file."""
    return save_image(images_dir / 'photo.jpg')


@pytest.fixture
def png_file(images_dir):
    """Fixture providing a PNG file with transparency."""
    return save_image(images_dir / 'image.png', mode='RGBA', color=(255, 0, 0, 128))


@pytest.fixture
def gif_file(images_dir):
    """Fixture providing a single-frame GIF file."""
    return save_image(images_dir / 'still.gif', mode='P', color=1)


@pytest.fixture
def webp_file(images_dir):
    """Fixture providing a WebP file."""
    return save_image(images_dir / 'image.webp', size=(80, 40), color='blue')


@pytest.fixture
def animated_gif(images_dir):
    """Fixture providing a three-frame animated GIF."""
    path = images_dir / 'animated.gif'
    frames = [Image.new('P', (20, 20), color=i) for i in (1, 2, 3)]
    frames[0].save(path, save_all=True, append_images=frames[1:], duration=100, loop=0)
    return str(path)


@pytest.fixture
def fake_jpeg(images_dir):
    """Fixture providing a file named like a JPEG that holds no image."""
    path = images_dir / 'fake.jpg'
    path.write_bytes(b'this is not an image at all, just text bytes')
    return str(path)


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    img = Image.new('RGB', (100, 100), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def sample_image_info():
    """Fixture providing a sample image descriptor."""
    from thumbcache.image_record import ImageInfo

    return ImageInfo(
        path='/photos/image1.jpg',
        filename='image1.jpg',
        size=51200,
        modified=1_700_000_000,
        format='jpg',
    )
