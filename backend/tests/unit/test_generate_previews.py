"""
Unit tests for the preview generation tool.
"""
import os

import pytest
from PIL import Image

import generate_previews
from text_style.catalog import TextPreset


@pytest.fixture
def builtin_catalog(monkeypatch, outline_preset, shadow_preset):
    """Run the tool against the catalog presets on the built-in face."""
    presets = {p.name: p for p in (outline_preset, shadow_preset)}
    monkeypatch.setattr(generate_previews, 'TEXT_PRESETS', tuple(presets.values()))
    monkeypatch.setattr(generate_previews, 'get_preset', presets.get)
    return presets


class TestSelectPresets:
    """Tests for select_presets function."""

    def test_all_by_default(self, builtin_catalog):
        assert [p.name for p in generate_previews.select_presets([])] == list(builtin_catalog)

    def test_by_name(self, builtin_catalog):
        assert [p.name for p in generate_previews.select_presets(['Shadow Title'])] == ['Shadow Title']

    def test_unknown_name_exits(self, builtin_catalog):
        with pytest.raises(SystemExit):
            generate_previews.select_presets(['Missing'])


class TestMain:
    """Tests for the command line entry point."""

    def test_write_failure_counts_as_failed(self, builtin_catalog, tmp_path, monkeypatch):
        """An unwritable preview should fail that preset and keep the others."""
        real_write = generate_previews.write_image

        def write_or_fail(data, path):
            if path.endswith('1.png'):
                raise OSError('read-only file system')
            return real_write(data, path)

        monkeypatch.setattr(generate_previews, 'write_image', write_or_fail)

        code = generate_previews.main(['--assets-dir', str(tmp_path), '--no-log-file'])
        assert code == 1
        assert (tmp_path / 'text' / '2.png').exists()
        assert not (tmp_path / 'text' / '1.png').exists()

    def test_writes_previews(self, builtin_catalog, tmp_path):
        """Every preset should be written to its preview path."""
        code = generate_previews.main(['--assets-dir', str(tmp_path), '--no-log-file'])
        assert code == 0
        for name in ('1.png', '2.png'):
            path = tmp_path / 'text' / name
            assert path.exists()
            with Image.open(path) as image:
                assert image.mode == 'RGBA'

    def test_dry_run_writes_nothing(self, builtin_catalog, tmp_path, capsys):
        """--dry-run should only print the targets."""
        code = generate_previews.main(['--assets-dir', str(tmp_path), '--dry-run', '--no-log-file'])
        assert code == 0
        assert not os.listdir(tmp_path)
        assert 'Outline Title' in capsys.readouterr().out

    def test_failure_sets_exit_code(self, monkeypatch, tmp_path, base_style):
        """A failing preset should give exit code 1 and not stop the others."""
        good = TextPreset(name='Good', preview='text/good.png', style=base_style)
        bad = TextPreset(name='Bad', preview='text/bad.png', style=dict(base_style, fontSize=-3))
        monkeypatch.setattr(generate_previews, 'TEXT_PRESETS', (good, bad))

        code = generate_previews.main(['--assets-dir', str(tmp_path), '--no-log-file'])
        assert code == 1
        assert (tmp_path / 'text' / 'good.png').exists()
        assert not (tmp_path / 'text' / 'bad.png').exists()

    def test_fail_fast_aborts(self, monkeypatch, tmp_path, base_style):
        """--fail-fast should abort with exit code 1."""
        bad = TextPreset(name='Bad', preview='text/bad.png', style=dict(base_style, content=''))
        monkeypatch.setattr(generate_previews, 'TEXT_PRESETS', (bad,))

        code = generate_previews.main(['--assets-dir', str(tmp_path), '--fail-fast', '--no-log-file'])
        assert code == 1
