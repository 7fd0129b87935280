"""
Output tree writer.

Rendered leaves land at ``<dist>/<output_path>``, which mirrors the
parent > collection > subcollection shape of the taxonomy.
"""

import json
import logging
import os

from .files import write_file
from .markup import prettify_html


class OutputWriter:
    def __init__(self, dist, pretty=False):
        self.dist = dist
        self.pretty = pretty
        self.files_written = 0
        self.logger = logging.getLogger('Echo.Writer')

    def destination(self, output_path):
        return os.path.join(self.dist, *output_path.split('/'))

    def write(self, output_path, text):
        """Write ``text`` to ``output_path`` below the dist root; return the full path."""
        if self.pretty:
            text = prettify_html(text)
        path = self.destination(output_path)
        write_file(path, text)
        self.files_written += 1
        self.logger.debug(f"Generated HTML: {path}")
        return path

    def dump(self, path, state):
        """Write the whole in-memory build state as JSON."""
        write_file(path, json.dumps(state.to_dict(), indent=2, default=str))
        self.logger.debug(f"Wrote state dump: {path}")
        return path
