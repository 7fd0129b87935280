"""
Echo - pattern library and static site assembler.

Echo discovers partials and pages across a source tree, classifies them
into a parent > collection > subcollection taxonomy from their directory
depth, merges each file's front matter with shared YAML site data, renders
everything through layout-wrapped Jinja2 templates and writes a mirrored
tree of HTML files.
"""

__version__ = "1.0.0"

from .core import Echo
from .errors import BuildIOError, EchoError, LayoutError, ParseError, RenderError

__all__ = ['Echo', 'EchoError', 'ParseError', 'LayoutError', 'RenderError', 'BuildIOError']
