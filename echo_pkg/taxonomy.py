"""
Taxonomy builder.

Every discovered file is placed purely from its directory depth below a
root's base directory:

    <base>/<parent>/file                        -> parent
    <base>/<parent>/<collection>/file           -> parent > collection
    <base>/<parent>/.../<collection>/<sub>/file -> parent > collection > sub

A subcollection named like its own collection collapses into the
collection. Containers are created the first time a placement needs them
and are only ever extended afterwards.
"""

import logging
import os
from collections import namedtuple
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import ParseError
from .files import resolve_globs
from .frontmatter import load_document
from .names import name_of, namespace_key, slugify, title_case
from .rendering import namespaced_fields, rewrite_tokens

PARENT = 'parent'
COLLECTION = 'collection'
SUBCOLLECTION = 'subcollection'
PARTIAL = 'partial'
PAGE = 'page'

PATH_SLUGS = 'path'
ANCHOR_SLUGS = 'anchor'

Placement = namedtuple('Placement', ['parent', 'collection', 'subcollection'])


@dataclass
class LeafNode:
    """A content file: the only kind of node that carries a body."""

    id: str
    name: str
    slug: str
    type: str
    partial_id: str
    output_path: str
    source: str
    data: Dict[str, Any] = field(default_factory=dict)
    html: str = ''
    notes: str = ''
    spec: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'type': self.type,
            'partialID': self.partial_id,
            'outputPath': self.output_path,
            'source': self.source,
            'data': self.data,
            'html': self.html,
            'notes': self.notes,
            'spec': self.spec,
        }


@dataclass
class ContainerNode:
    """A parent, collection or subcollection grouping other nodes."""

    id: str
    name: str
    slug: str
    type: str
    items: Dict[str, 'Node'] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'type': self.type,
            'items': {key: item.to_dict() for key, item in self.items.items()},
        }


Node = Union[ContainerNode, LeafNode]


@dataclass
class TaxonomyRoot:
    """
    One set of glob patterns classified relative to ``base_dir``.

    ``library_parents`` names parent directories whose files are only
    registered as partials and never become tree nodes.
    """

    key: str
    base_dir: str
    patterns: List[str]
    node_type: str = PAGE
    slug_style: str = PATH_SLUGS
    register_partials: bool = False
    library_parents: Tuple[str, ...] = ()
    preserve_numbers: bool = False


def classify(file_path: str, base_dir: str) -> Placement:
    """Derive (parent, collection, subcollection) from a file's directory."""
    rel_dir = os.path.relpath(os.path.dirname(os.path.normpath(file_path)),
                              os.path.normpath(base_dir))
    if rel_dir == os.curdir or rel_dir == os.pardir or rel_dir.startswith(os.pardir + os.sep):
        raise ParseError(f"File is not inside a parent directory of {base_dir}", file_path)

    segments = rel_dir.split(os.sep)
    parent, stubs = segments[0], segments[1:]

    if len(stubs) > 1:
        collection = stubs[-2]
    elif stubs:
        collection = stubs[0]
    else:
        collection = None

    subcollection = stubs[-1] if collection else None
    if subcollection == collection:
        subcollection = None

    return Placement(parent, collection, subcollection)


def iter_leaves(nodes) -> Iterator[LeafNode]:
    """Yield every leaf below ``nodes`` (a node or a mapping of nodes) once."""
    if isinstance(nodes, LeafNode):
        yield nodes
        return
    if isinstance(nodes, ContainerNode):
        nodes = nodes.items
    for node in nodes.values():
        yield from iter_leaves(node)


class TaxonomyBuilder:
    """Classify a root's files into a node tree held by the build state."""

    def __init__(self, state, markdown=None, id_delimiter='__', extract_spec=True):
        self.state = state
        self.markdown = markdown
        self.id_delimiter = id_delimiter
        self.extract_spec = extract_spec
        self.logger = logging.getLogger('Echo.Taxonomy')

    def build(self, root: TaxonomyRoot) -> Dict[str, ContainerNode]:
        tree = self.state.trees.setdefault(root.key, {})
        files = resolve_globs(root.patterns)
        self.logger.debug(f"Found {len(files)} files for '{root.key}'")
        for file_path in files:
            self.add_file(tree, root, file_path)
        return tree

    def add_file(self, tree, root, file_path) -> Optional[LeafNode]:
        placement = classify(file_path, root.base_dir)
        doc = load_document(file_path, markdown=self.markdown, extract_spec=self.extract_spec)

        base_name = name_of(file_path, preserve_numbers=root.preserve_numbers) \
            or name_of(file_path, preserve_numbers=True)
        if placement.subcollection:
            partial_id = placement.subcollection + self.id_delimiter + base_name
        else:
            partial_id = base_name

        html = doc.body
        if root.register_partials:
            namespace = namespace_key(partial_id)
            html = rewrite_tokens(html, namespaced_fields(doc.data, namespace))
            self.state.registry.register(partial_id, html, source=file_path)
            if doc.data:
                self.state.partial_data[namespace] = doc.data
            else:
                self.state.partial_data.pop(namespace, None)

        if placement.parent in root.library_parents:
            return None

        container = self._container(tree, placement, file_path)
        leaf_id = self._free_key(container, base_name)
        output_path = self._output_path(container, leaf_id, file_path)
        leaf = LeafNode(
            id=leaf_id,
            name=title_case(leaf_id),
            slug=self._leaf_slug(root, placement, leaf_id, partial_id, output_path),
            type=root.node_type,
            partial_id=partial_id,
            output_path=output_path,
            source=file_path,
            data=doc.data,
            html=html,
            notes=doc.notes,
            spec=doc.spec,
        )
        container.items[leaf_id] = leaf
        return leaf

    def _container(self, tree, placement, file_path) -> ContainerNode:
        container = tree.get(placement.parent)
        if container is None:
            container = tree[placement.parent] = ContainerNode(
                id=placement.parent,
                name=title_case(placement.parent),
                slug=slugify(placement.parent),
                type=PARENT,
            )

        for level, segment in ((COLLECTION, placement.collection),
                               (SUBCOLLECTION, placement.subcollection)):
            if not segment:
                break
            child = container.items.get(segment)
            if child is None:
                child = container.items[segment] = ContainerNode(
                    id=segment,
                    name=title_case(segment),
                    slug='/'.join(part for part in (container.slug, slugify(segment)) if part),
                    type=level,
                )
            elif isinstance(child, LeafNode):
                raise ParseError(
                    f"'{segment}' is both a file ({child.source}) and a directory in '{container.id}'",
                    file_path
                )
            container = child
        return container

    def _free_key(self, container, leaf_id) -> str:
        if leaf_id not in container.items:
            return leaf_id
        key = container.id + self.id_delimiter + leaf_id
        suffix = 2
        while key in container.items:
            key = f"{container.id}{self.id_delimiter}{leaf_id}-{suffix}"
            suffix += 1
        self.logger.warning(f"'{leaf_id}' already exists in '{container.id}', stored as '{key}'")
        return key

    def _output_path(self, container, leaf_id, file_path) -> str:
        wanted = '/'.join(
            part for part in (container.slug, slugify(leaf_id) or 'index') if part
        ) + '.html'
        output_path = self.state.claim_output_path(wanted)
        if output_path != wanted:
            self.logger.warning(f"{file_path} would overwrite {wanted}, written to {output_path}")
        return output_path

    def _leaf_slug(self, root, placement, leaf_id, partial_id, output_path) -> str:
        if root.slug_style == ANCHOR_SLUGS:
            if placement.collection:
                return f"{slugify(placement.collection)}.html#{slugify(partial_id)}"
            return f"{slugify(leaf_id)}.html"
        return output_path[:-len('.html')]
