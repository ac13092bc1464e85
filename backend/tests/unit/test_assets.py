"""
Unit tests for asset path resolution and image writing.
"""
import os

import pytest

from assets import AssetPathError, resolve_asset_path, write_image


class TestResolveAssetPath:
    """Tests for resolve_asset_path function."""

    def test_resolves_under_root(self, tmp_path):
        """Keys should resolve beneath the assets root."""
        path = resolve_asset_path('text/1.png', str(tmp_path))
        assert path == os.path.join(str(tmp_path), 'text', '1.png')

    @pytest.mark.parametrize('key', ['', '/etc/passwd', '../outside.png', 'text/../../x.png'])
    def test_rejects_escaping_keys(self, tmp_path, key):
        """Keys must not escape the assets root."""
        with pytest.raises(AssetPathError):
            resolve_asset_path(key, str(tmp_path))


class TestWriteImage:
    """Tests for write_image function."""

    def test_writes_bytes_and_creates_dirs(self, temp_output_dir):
        """write_image() should create parents and write the data."""
        path = os.path.join(temp_output_dir, 'nested', 'dir', 'out.png')
        assert write_image(b'\x89PNG-data', path) == path
        with open(path, 'rb') as f:
            assert f.read() == b'\x89PNG-data'

    def test_overwrites_and_leaves_no_temp_files(self, temp_output_dir):
        """Rewriting should replace the file without leftovers."""
        path = os.path.join(temp_output_dir, 'out.png')
        write_image(b'one', path)
        write_image(b'two', path)
        with open(path, 'rb') as f:
            assert f.read() == b'two'
        assert os.listdir(temp_output_dir) == ['out.png']
