"""
Errors raised while assembling a site.

Every error is fatal for the build. The CLI catches them once and reports
the normalized ``name``/``reason``/``message`` shape.
"""

from typing import Any, Dict, Optional


class EchoError(Exception):
    """Base class for build failures."""

    reason = ''

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'reason': self.reason, 'message': self.message}


class ParseError(EchoError):
    """Malformed front matter, data file or unplaceable content file."""

    reason = 'parse'

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class LayoutError(EchoError):
    """Missing body placeholder or unknown layout name."""

    reason = 'layout'


class RenderError(EchoError):
    """Template compilation or execution failed for a node."""

    reason = 'render'

    def __init__(self, message: str, node_id: Optional[str] = None):
        super().__init__(f"[{node_id}] {message}" if node_id else message)
        self.node_id = node_id


class BuildIOError(EchoError):
    """Reading, writing or creating a directory failed."""

    reason = 'io'

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path
