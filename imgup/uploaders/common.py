"""Common utilities for uploader modules."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from imgup.core.validation import IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)


def is_image_file(path: Path) -> bool:
    """Check whether a path looks like a supported source image."""
    return path.suffix.lower() in IMAGE_EXTENSIONS and not path.name.startswith(".")


def collect_image_files(root: Path, *, recursive: bool = True) -> list[Path]:
    """Collect JPEG and PNG files under a directory.

    Args:
        root: Directory to search.
        recursive: If True, descend into subdirectories.

    Returns:
        Sorted list of file paths.

    Raises:
        ValueError: If root is not a directory.
    """
    if not root.exists() or not root.is_dir():
        raise ValueError(f"Not a directory: {root}")

    pattern = "**/*" if recursive else "*"
    files: list[Path] = []
    for path in root.glob(pattern):
        if not path.is_file():
            continue

        # Skip hidden directories along the way
        if any(part.startswith(".") for part in path.relative_to(root).parts):
            continue

        # Skip broken symlinks
        if path.is_symlink():
            try:
                if not path.resolve().exists():
                    continue
            except (OSError, ValueError):
                continue

        if is_image_file(path):
            files.append(path)

    return sorted(files)


def expand_sources(sources: Iterable[Path], *, recursive: bool = True) -> list[Path]:
    """Expand a mix of files and directories into a list of image files.

    Directories contribute their JPEG/PNG files; files are kept as given
    (validation happens when they are read). Duplicates are dropped while
    preserving order.
    """
    seen: set[Path] = set()
    result: list[Path] = []

    for source in sources:
        source = Path(source).expanduser()
        candidates = (
            collect_image_files(source, recursive=recursive) if source.is_dir() else [source]
        )
        for path in candidates:
            key = path.resolve()
            if key in seen:
                logger.debug("Skipping duplicate source %s", path)
                continue
            seen.add(key)
            result.append(path)

    return result
