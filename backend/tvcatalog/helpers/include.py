"""
Parsing for the ?include= query parameter.

`include=episodes.characters,episodes` becomes the tree
{"episodes": {"characters": {}}}. Names a resource cannot expand are dropped.
"""
from typing import Any, Dict, List, Optional, Union

from ..config.constants import INCLUDE_RELATIONS

# relation name -> nested IncludeTree
IncludeTree = Dict[str, Any]


def parse_include(values: Optional[Union[str, List[str]]]) -> IncludeTree:
    """Build the nested include tree from one or more comma separated values."""
    tree: IncludeTree = {}
    if not values:
        return tree
    if isinstance(values, str):
        values = [values]

    for value in values:
        for item in value.split(","):
            node = tree
            for segment in item.split("."):
                segment = segment.strip()
                if segment:
                    node = node.setdefault(segment, {})
    return tree


def prune_include(tree: IncludeTree, resource: Optional[str]) -> IncludeTree:
    """Keep only the relations `resource` (and its children) can expand."""
    relations = INCLUDE_RELATIONS.get(resource, {}) if resource else {}
    pruned: IncludeTree = {}
    for name, subtree in tree.items():
        if name in relations:
            pruned[name] = prune_include(subtree, relations[name])
    return pruned
