"""
Filesystem access for the build: glob discovery, reading and writing.

All ``OSError`` failures surface as ``BuildIOError``.
"""

import glob
import os

from .errors import BuildIOError


def resolve_globs(patterns):
    """
    Return the files matching ``patterns`` in pattern order.

    Patterns starting with ``!`` remove matches of the remaining pattern.
    Duplicates keep their first position. Directories are never returned.
    """
    if isinstance(patterns, str):
        patterns = [patterns]

    included = []
    excluded = set()
    for pattern in patterns:
        if pattern.startswith('!'):
            excluded.update(os.path.normpath(p) for p in glob.glob(pattern[1:], recursive=True))
            continue
        for match in sorted(glob.glob(pattern, recursive=True)):
            if os.path.isfile(match):
                included.append(os.path.normpath(match))

    seen = set()
    files = []
    for path in included:
        if path in excluded or path in seen:
            continue
        seen.add(path)
        files.append(path)
    return files


def read_file(path):
    """Read a UTF-8 text file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (IOError, OSError, UnicodeDecodeError) as e:
        raise BuildIOError(f"Failed to read file ({e})", path) from e


def write_file(path, content):
    """Write a UTF-8 text file, creating parent directories first."""
    ensure_dir(os.path.dirname(path))
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except (IOError, OSError) as e:
        raise BuildIOError(f"Failed to write file ({e})", path) from e


def ensure_dir(path):
    """Recursively create ``path`` if it does not exist."""
    if not path:
        return
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise BuildIOError(f"Failed to create directory ({e})", path) from e
