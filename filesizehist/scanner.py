"""
Recursive file size collection.

``scan_file_sizes`` checks the root up front and then hands back a generator,
so a misconfigured root fails immediately while the walk itself stays lazy.
"""
from __future__ import annotations

import logging
import os
import stat
from typing import Callable, Iterator, Optional, Union

from .errors import ScanError

logger = logging.getLogger('filesizehist.scanner')

PathLike = Union[str, os.PathLike]
SkipCallback = Callable[[str, OSError], None]


def _check_root(root: str) -> None:
    if not os.path.exists(root):
        raise ScanError(root, "path does not exist")
    if not os.path.isdir(root):
        raise ScanError(root, "not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise ScanError(root, "permission denied")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ScanError(root, e.strerror or str(e)) from e


def _walk_sizes(root: str, on_skip: Optional[SkipCallback]) -> Iterator[int]:
    def _skip(path: str, exc: OSError) -> None:
        logger.debug(f"Skipping {path}: {exc}")
        if on_skip is not None:
            on_skip(path, exc)

    def _walk_error(exc: OSError) -> None:
        # Unreadable subdirectory; the rest of the tree is still walked
        _skip(exc.filename or root, exc)

    scanned = 0
    for dirpath, _dirs, files in os.walk(root, onerror=_walk_error, followlinks=False):
        for name in files:
            path = os.path.join(dirpath, name)
            try:
                st = os.lstat(path)
            except OSError as e:
                _skip(path, e)
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            scanned += 1
            yield st.st_size
    logger.info(f"Scanned {scanned} files under {root}")


def scan_file_sizes(root: PathLike, on_skip: Optional[SkipCallback] = None) -> Iterator[int]:
    """
    Yield the size in bytes of every regular file below ``root``.

    Args:
        root: Directory to walk recursively. Symlinks are neither followed nor reported.
        on_skip: Optional callback invoked with (path, error) for entries that
            could not be read; they are skipped and the walk continues.

    Returns:
        A single-pass iterator of file sizes in traversal order.

    Raises:
        ScanError: If ``root`` does not exist, is not a directory or cannot be read.
    """
    root = os.fspath(root)
    _check_root(root)
    return _walk_sizes(root, on_skip)
