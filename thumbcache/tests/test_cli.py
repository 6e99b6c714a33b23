"""Tests for CLI module."""

import argparse
import base64

import pytest

from thumbcache.cli import create_parser, get_config, main


@pytest.fixture
def cache_env(monkeypatch, tmp_path):
    """Point the default cache location into tmp_path."""
    cache = tmp_path / 'env-cache'
    monkeypatch.setenv('THUMBCACHE_DIR', str(cache))
    monkeypatch.delenv('THUMBCACHE_LOG_LEVEL', raising=False)
    monkeypatch.delenv('THUMBCACHE_EXPIRY_SECONDS', raising=False)
    return cache


class TestParser:
    """Tests for argument parser."""

    def test_create_parser(self):
        """Test parser creation."""
        parser = create_parser()

        assert parser is not None
        assert parser.prog == 'thumbcache'

    def test_thumbnail_arguments(self):
        """Test thumbnail command arguments."""
        args = create_parser().parse_args(['thumbnail', 'a.jpg', '-s', '64', '-f', '-o', 'out.jpg'])

        assert args.command == 'thumbnail'
        assert args.size == 64
        assert args.force is True
        assert args.output == 'out.jpg'

    def test_warm_defaults(self):
        """Test warm command defaults."""
        args = create_parser().parse_args(['warm', '/photos'])

        assert args.current == 0
        assert args.range is None
        assert args.cadence == 0.0
        assert args.dry_run is False
        assert args.limit is None

    def test_serve_defaults(self):
        """Test serve command defaults."""
        args = create_parser().parse_args(['serve'])

        assert args.host == '127.0.0.1'
        assert args.port == 8765
        assert args.no_clean is False

    def test_common_arguments(self):
        """Test every command accepts cache overrides."""
        args = create_parser().parse_args(['clean', '--cache-dir', '/tmp/x', '--expiry', '60', '-v'])

        assert args.cache_dir == '/tmp/x'
        assert args.expiry == 60
        assert args.verbose is True


class TestGetConfig:
    """Tests for configuration resolution."""

    def test_cli_overrides_env(self, cache_env, tmp_path):
        """Test --cache-dir and --expiry win over the environment."""
        args = argparse.Namespace(cache_dir=str(tmp_path / 'cli'), expiry=10)

        config = get_config(args)

        assert config.cache_dir == tmp_path / 'cli'
        assert config.expiry_seconds == 10

    @pytest.mark.parametrize('expiry', [0, -5])
    def test_non_positive_expiry_is_applied(self, cache_env, expiry):
        """Test a zero or negative --expiry reaches the config unchanged."""
        config = get_config(argparse.Namespace(expiry=expiry))

        assert config.expiry_seconds == expiry
        assert 'Expiry window must be positive' in config.validate()

    def test_env_used_without_flags(self, cache_env):
        """Test THUMBCACHE_DIR is used when no flag is given."""
        config = get_config(argparse.Namespace())

        assert config.cache_dir == cache_env


class TestCommands:
    """Tests for command execution."""

    def test_no_command(self, capsys):
        """Test running without a command prints help."""
        assert main([]) == 1
        assert 'usage' in capsys.readouterr().out

    def test_list(self, cache_env, images_dir, jpeg_file, fake_jpeg, capsys):
        """Test the list command reports images and skips."""
        assert main(['list', str(images_dir)]) == 0

        out = capsys.readouterr().out
        assert 'photo.jpg - JPG' in out
        assert fake_jpeg in out

    def test_list_missing_folder(self, cache_env, tmp_path):
        """Test listing a folder that does not exist."""
        assert main(['list', str(tmp_path / 'nope')]) == 1

    def test_thumbnail_to_file(self, cache_env, jpeg_file, tmp_path):
        """Test writing the decoded thumbnail to a file."""
        out = tmp_path / 'thumb.jpg'

        assert main(['thumbnail', jpeg_file, '-s', '20', '-o', str(out)]) == 0
        assert out.read_bytes()[:3] == b'\xff\xd8\xff'

    def test_thumbnail_to_stdout(self, cache_env, jpeg_file, capsys):
        """Test the base64 payload is printed."""
        assert main(['thumbnail', jpeg_file]) == 0

        payload = capsys.readouterr().out.strip()
        assert base64.b64decode(payload)[:3] == b'\xff\xd8\xff'

    def test_thumbnail_failure(self, cache_env, fake_jpeg):
        """Test a rejected file gives exit code 1."""
        assert main(['thumbnail', fake_jpeg]) == 1

    def test_info(self, cache_env, webp_file, capsys):
        """Test full image details."""
        assert main(['info', webp_file]) == 0

        out = capsys.readouterr().out
        assert 'Size:     80x40' in out
        assert 'Format:   webp' in out

    def test_warm(self, cache_env, images_dir, jpeg_file, png_file, capsys):
        """Test warming a folder then cleaning leaves fresh entries."""
        assert main(['warm', str(images_dir), '-q']) == 0
        assert len(list(cache_env.glob('*.json'))) == 2

        assert main(['clean']) == 0
        assert 'Removed 0 expired or corrupt cache entries' in capsys.readouterr().out

    def test_warm_dry_run(self, cache_env, images_dir, jpeg_file):
        """Test a dry run writes nothing."""
        assert main(['warm', str(images_dir), '-n', '-q']) == 0
        assert not cache_env.exists()

    def test_clean_removes_corrupt(self, cache_env, capsys):
        """Test clean on a cache with a damaged entry."""
        cache_env.mkdir()
        (cache_env / ('0' * 32 + '.json')).write_text('{')

        assert main(['clean']) == 0
        assert 'Removed 1 expired' in capsys.readouterr().out

    def test_stats(self, cache_env, capsys):
        """Test stats on an empty cache."""
        assert main(['stats', '--cache-dir', str(cache_env)]) == 0

        out = capsys.readouterr().out
        assert 'THUMBNAIL CACHE SUMMARY' in out
        assert 'Total Entries:' in out

    def test_invalid_config(self, cache_env, monkeypatch):
        """Test a bad environment setting fails the command."""
        monkeypatch.setenv('THUMBCACHE_JPEG_QUALITY', '0')

        assert main(['stats']) == 1

    def test_zero_expiry_rejected(self, cache_env):
        """Test --expiry 0 fails validation instead of falling back to the default."""
        assert main(['clean', '--expiry', '0']) == 1
        assert not cache_env.exists()

    def test_serve_sweeps_then_runs(self, cache_env, mocker):
        """Test serve cleans the cache before starting the server."""
        run_server = mocker.patch('thumbcache.server.run_server')
        sweep = mocker.patch('thumbcache.image_service.ImageService.clear_expired_cache', return_value=0)

        assert main(['serve', '--port', '9999']) == 0

        sweep.assert_called_once()
        assert run_server.call_args.kwargs['port'] == 9999

    def test_serve_no_clean(self, cache_env, mocker):
        """Test --no-clean skips the startup sweep."""
        mocker.patch('thumbcache.server.run_server')
        sweep = mocker.patch('thumbcache.image_service.ImageService.clear_expired_cache')

        assert main(['serve', '--no-clean']) == 0

        sweep.assert_not_called()
