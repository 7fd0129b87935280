"""
Render context assembly.

Later sources win on key conflicts:

1. site data (one key per data file)
2. the taxonomy: the trees, ``data``, and the partial data namespaces
   under ``_partials``
3. the node itself: reserved node fields, then its front-matter fields
"""

from .rendering import PARTIALS_KEY

RESERVED_FIELDS = ('type', 'name', 'id', 'slug', 'partial_id', 'html', 'spec', 'notes')


def node_context(leaf, default_layout=None):
    """
    Context keys contributed by ``leaf`` and the layout it asks for.

    A ``layout`` front-matter field overrides ``default_layout``.
    """
    context = {}
    for field_name in RESERVED_FIELDS:
        value = getattr(leaf, field_name, None)
        if value is not None:
            context[field_name] = value
    context['partialType'] = leaf.type

    layout_name = default_layout
    for key, value in leaf.data.items():
        context[key] = value
        if key == 'layout' and value:
            layout_name = str(value)

    return context, layout_name


def build_context(leaf, state, default_layout=None):
    """Return ``(context, layout_name)`` for rendering ``leaf``."""
    local, layout_name = node_context(leaf, default_layout)

    context = {}
    context.update(state.data)
    context.update(state.taxonomy())
    context['data'] = state.data
    context[PARTIALS_KEY] = state.partial_data
    context.update(local)
    return context, layout_name
