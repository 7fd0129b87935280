"""
Markdown and HTML helpers used by the build.
"""

import mistune
from bs4 import BeautifulSoup


class NotesRenderer(mistune.HTMLRenderer):
    """HTML renderer that leaves raw HTML in notes untouched."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code, info=None):
        escaped_code = mistune.escape(code)
        if info:
            lang = mistune.escape(info.split(None, 1)[0])
            return '<pre><code class="language-{}">{}</code></pre>\n'.format(lang, escaped_code)
        return '<pre><code>{}</code></pre>\n'.format(escaped_code)


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    return mistune.create_markdown(
        renderer=NotesRenderer(),
        plugins=['table', 'task_lists', 'strikethrough']
    )


def prettify_html(html):
    """Re-indent an HTML document. Cosmetic only."""
    return BeautifulSoup(html, 'html.parser').prettify()
