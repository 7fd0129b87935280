"""
Per-build state.

A fresh ``BuildState`` is created for every build and handed to each stage;
nothing survives from one build to the next.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from .rendering import PartialRegistry
from .taxonomy import ContainerNode, LeafNode, iter_leaves


@dataclass
class BuildState:
    trees: Dict[str, Dict[str, ContainerNode]] = field(default_factory=dict)
    layouts: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)
    partial_data: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    registry: PartialRegistry = field(default_factory=PartialRegistry)
    index: Optional[LeafNode] = None
    output_paths: Set[str] = field(default_factory=set)

    def leaves(self):
        """Every rendered leaf: tree leaves in tree order, then the index."""
        for tree in self.trees.values():
            yield from iter_leaves(tree)
        if self.index is not None:
            yield self.index

    def claim_output_path(self, output_path: str) -> str:
        """Reserve ``output_path`` for one leaf; a taken path gets a numeric suffix."""
        stem, ext = posixpath.splitext(output_path)
        candidate = output_path
        suffix = 2
        while candidate in self.output_paths:
            candidate = f"{stem}-{suffix}{ext}"
            suffix += 1
        self.output_paths.add(candidate)
        return candidate

    def taxonomy(self) -> Dict[str, Any]:
        """The trees as exposed to templates, keyed by root."""
        return dict(self.trees)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'trees': {
                key: {parent: node.to_dict() for parent, node in tree.items()}
                for key, tree in self.trees.items()
            },
            'layouts': sorted(self.layouts),
            'data': self.data,
            'partials': self.registry.ids(),
            'index': self.index.to_dict() if self.index else None,
        }
