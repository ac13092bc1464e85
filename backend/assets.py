"""
Asset paths and image writing for generated previews.
"""
import os
import tempfile

from text_style.logging_config import get_logger

logger = get_logger('assets')

# Root of the editor's static assets (preview keys like 'text/1.png' live under it)
ASSETS_DIR = os.getenv('ASSETS_DIR', os.path.join(os.path.dirname(__file__), 'assets'))


class AssetPathError(ValueError):
    """Asset key points outside the assets directory."""


def resolve_asset_path(key: str, assets_dir: str = None) -> str:
    """
    Map a logical asset key to a file path.

    Args:
        key: Asset key relative to the assets root (e.g., 'text/1.png')
        assets_dir: Override for ASSETS_DIR

    Returns:
        Absolute file path
    """
    root = os.path.abspath(assets_dir or ASSETS_DIR)
    if not key or os.path.isabs(key):
        raise AssetPathError(f'Invalid asset key: {key!r}')

    path = os.path.abspath(os.path.join(root, key))
    if os.path.commonpath([root, path]) != root:
        raise AssetPathError(f'Asset key escapes assets directory: {key!r}')
    return path


def write_image(data: bytes, path: str) -> str:
    """
    Write encoded image bytes to path, creating parent directories.

    The file is written to a temp file first and moved into place so a failed
    write never leaves a truncated image behind.

    Returns:
        The written path
    """
    directory = os.path.dirname(path) or '.'
    os.makedirs(directory, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(temp_path, path)
    except OSError:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    logger.debug(f'Wrote {len(data)} bytes to {path}')
    return path
