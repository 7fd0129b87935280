"""
Front matter handling for content files.

A content file is an optional ``---`` fenced YAML block followed by the
body. ``notes`` and ``spec`` are reserved keys: they never end up in a
node's data.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .errors import ParseError
from .files import read_file

FRONT_MATTER_PATTERN = re.compile(
    r'\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)',
    re.DOTALL | re.MULTILINE
)
LEADING_BLANK_LINES = re.compile(r'\A(?:[ \t]*(?:\r\n|\r|\n))+')
TRAILING_BLANK_LINES = re.compile(r'[ \t]*(?:(?:\r\n|\r|\n)[ \t]*)+\Z')

RESERVED_KEYS = ('notes', 'spec')


@dataclass
class Document:
    """A content file split into stored data and body."""

    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ''
    notes: str = ''
    spec: Optional[str] = None


def split_front_matter(text: str, path: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """Return ``(metadata, body)`` for the raw file ``text``."""
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        return {}, text

    try:
        metadata = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML front matter: {e}", path) from e

    if metadata is None:
        metadata = {}
    elif not isinstance(metadata, dict):
        raise ParseError(
            f"Front matter must be a mapping, got {type(metadata).__name__}", path
        )
    return metadata, text[match.end():]


def trim_blank_lines(body: str) -> str:
    """Drop runs of blank lines at the start and end of ``body``."""
    return TRAILING_BLANK_LINES.sub('', LEADING_BLANK_LINES.sub('', body))


def normalize(text: str,
              markdown: Optional[Callable[[str], str]] = None,
              extract_spec: bool = True,
              path: Optional[str] = None) -> Document:
    """
    Split ``text`` and segregate the reserved keys.

    ``notes`` is rendered through ``markdown`` (empty string when absent).
    With ``extract_spec`` the ``spec`` field is kept apart as well;
    otherwise it stays in the data like any other field.
    """
    metadata, body = split_front_matter(text, path)
    data = dict(metadata)

    notes = data.pop('notes', None)
    if notes and markdown is not None:
        notes = markdown(str(notes))
    elif notes:
        notes = str(notes)
    else:
        notes = ''

    spec = data.pop('spec', None) if extract_spec else None

    return Document(data=data, body=trim_blank_lines(body), notes=notes, spec=spec)


def load_document(path: str,
                  markdown: Optional[Callable[[str], str]] = None,
                  extract_spec: bool = True) -> Document:
    """Read and normalize the content file at ``path``."""
    return normalize(read_file(path), markdown=markdown, extract_spec=extract_spec, path=path)
