"""
Layout wrapping and template rendering on top of Jinja2.

Layouts mark where page content goes with a ``{% body %}`` placeholder.
The placeholder is substituted textually before the combined string is
compiled, so it never reaches Jinja2 itself.
"""

import logging
import re

from jinja2 import DictLoader, Environment, TemplateSyntaxError

from .errors import LayoutError, RenderError

BODY_PLACEHOLDER = re.compile(r'\{%\s*(?:body\s*)?%\}')
STATEMENT_PATTERN = re.compile(
    r'(\{%-?\s*(?:if|elif|for\s+[^%]+?\s+in)\s)(.*?)(-?%\})', re.DOTALL
)

# Context key holding every partial's own front-matter data by namespace
PARTIALS_KEY = '_partials'


def wrap(body, layout, layout_name=None):
    """Insert ``body`` into ``layout`` at its body placeholder."""
    match = BODY_PLACEHOLDER.search(layout)
    if match is None:
        label = f"Layout '{layout_name}'" if layout_name else "Layout"
        raise LayoutError(f"{label} has no {{% body %}} placeholder")
    return layout[:match.start()] + body + layout[match.end():]


def rewrite_tokens(content, field_map):
    """
    Point template references to a field at other variables.

    ``field_map`` maps a field name to the expression that replaces it,
    e.g. ``{'title': 'card.title'}`` turns ``{{ title|upper }}`` into
    ``{{ card.title|upper }}``. Longer output expressions such as
    ``{{ title.text }}`` or ``{{ subtitle }}`` are left alone.

    Bare names in the test of ``{% if %}``/``{% elif %}`` and in the
    iterable of ``{% for ... in %}`` are rewritten too; loop targets and
    quoted strings are not.
    """
    for field_name, replacement in field_map.items():
        output = re.compile(
            r'(\{\{-?\s*)' + re.escape(field_name) + r'(\s*(?:\|[^{}]*?)?-?\}\})'
        )
        content = output.sub(lambda m: m.group(1) + replacement + m.group(2), content)

        name = re.compile(r'(?<![\w.\'"])' + re.escape(field_name) + r'(?![\w.(\[\'"])')
        content = STATEMENT_PATTERN.sub(
            lambda m: m.group(1) + name.sub(lambda _: replacement, m.group(2)) + m.group(3),
            content
        )
    return content


def namespaced_fields(data, namespace):
    """Field map sending each of ``data``'s keys into ``namespace`` under the partials key."""
    return {
        key: f"{PARTIALS_KEY}.{namespace}.{key}"
        for key in data
        if isinstance(key, str) and key.isidentifier()
    }


class PartialRegistry:
    """Named template fragments includable by id from any template."""

    def __init__(self):
        self.templates = {}
        self.logger = logging.getLogger('Echo.Render')

    def register(self, partial_id, content, source=None):
        if partial_id in self.templates:
            self.logger.warning(
                f"Partial '{partial_id}' registered again"
                + (f" by {source}" if source else "") + "; last registration wins"
            )
        self.templates[partial_id] = content
        self.logger.debug(f"Registered partial: {partial_id}")

    def __contains__(self, partial_id):
        return partial_id in self.templates

    def __len__(self):
        return len(self.templates)

    def ids(self):
        return list(self.templates)


class Renderer:
    """Compile layout-wrapped bodies and execute them against a context."""

    def __init__(self, registry):
        self.registry = registry
        self.env = Environment(
            loader=DictLoader(registry.templates),
            autoescape=False,
            keep_trailing_newline=True
        )
        self.logger = logging.getLogger('Echo.Render')

    def compile(self, source, node_id=None):
        try:
            return self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise RenderError(f"Template syntax error on line {e.lineno}: {e.message}", node_id) from e

    def render(self, body, layout, context, node_id=None, layout_name=None):
        """Wrap ``body`` in ``layout``, compile and render it."""
        template = self.compile(wrap(body, layout, layout_name), node_id)
        try:
            rendered = template.render(context)
        except Exception as e:
            raise RenderError(f"{type(e).__name__}: {e}", node_id) from e
        self.logger.debug(f"Rendered {node_id} with layout {layout_name}")
        return rendered
