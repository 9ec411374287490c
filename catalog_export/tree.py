"""Hierarchical markup serializer.

Turns a self-referencing entity set (``id``/``parent_id``) into nested
elements:

    <Category>
      <Id>1</Id> ... scalar fields in fixed order
      <Products> ... leaf items (deleted referents omitted)
      <SubCategories> ... child nodes, same shape, recursively
    </Category>

The parent/child relation is indexed once (parent id -> ordered children)
before any element is built. Traversal uses an explicit stack, so depth is
bounded only by memory. A node reached twice, an unknown parent id, a
duplicate id, or nodes unreachable from any root (a cycle) raise
``DataIntegrityError``.

With ``children_tag=None`` the same serializer writes flat element lists
(every node is a root).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from lxml import etree

from .descriptors import FieldDescriptor
from .errors import AccessorFault, DataIntegrityError
from .markup import root_element, xml_text
from .values import to_text

logger = logging.getLogger(__name__)


def _never(_item: Any) -> bool:
    return False


@dataclass(frozen=True)
class LeafGroup:
    """A nested collection written inside every node element.

    ``items`` returns the node's associated items; ``skip`` drops items
    silently (e.g. an association whose referenced entity is deleted).
    ``groups`` nest further collections inside each item element.
    """

    tag: str
    item_tag: str
    fields: Sequence[FieldDescriptor[Any]]
    items: Callable[[Any], Iterable[Any]]
    skip: Callable[[Any], bool] = _never
    groups: Sequence["LeafGroup"] = ()
    omit_empty: bool = False


class TreeIndex:
    """Parent id -> ordered children, built once per serialization."""

    def __init__(
        self,
        nodes: Iterable[Any],
        *,
        id_of: Callable[[Any], Hashable],
        parent_of: Callable[[Any], Optional[Hashable]],
        sort_key: Optional[Callable[[Any], Any]] = None,
    ):
        self.id_of = id_of
        self.parent_of = parent_of
        self.roots: List[Any] = []
        self._children: Dict[Hashable, List[Any]] = {}
        ids: set = set()
        parents: List[Tuple[Hashable, Hashable]] = []

        for node in nodes:
            node_id = id_of(node)
            if node_id in ids:
                raise DataIntegrityError(f"Duplicate node id: {node_id!r}")
            ids.add(node_id)
            parent_id = parent_of(node)
            if parent_id is None:
                self.roots.append(node)
            else:
                self._children.setdefault(parent_id, []).append(node)
                parents.append((node_id, parent_id))

        for node_id, parent_id in parents:
            if parent_id not in ids:
                raise DataIntegrityError(
                    f"Node {node_id!r} refers to unknown parent {parent_id!r}"
                )

        if sort_key is not None:
            self.roots.sort(key=sort_key)
            for siblings in self._children.values():
                siblings.sort(key=sort_key)

        self.size = len(ids)

    def children(self, node_id: Hashable) -> List[Any]:
        return self._children.get(node_id, [])


class HierarchicalTreeSerializer:
    """Writes entity trees (or flat lists) as nested elements."""

    def __init__(
        self,
        *,
        element_tag: str,
        fields: Sequence[FieldDescriptor[Any]],
        id_of: Callable[[Any], Hashable],
        parent_of: Callable[[Any], Optional[Hashable]] = lambda node: None,
        leaf_groups: Sequence[LeafGroup] = (),
        children_tag: Optional[str] = None,
        sort_key: Optional[Callable[[Any], Any]] = None,
    ):
        self.element_tag = element_tag
        self.fields = tuple(fields)
        self.id_of = id_of
        self.parent_of = parent_of
        self.leaf_groups = tuple(leaf_groups)
        self.children_tag = children_tag
        self.sort_key = sort_key

    def index(self, nodes: Iterable[Any]) -> TreeIndex:
        parent_of = self.parent_of if self.children_tag is not None else (lambda node: None)
        return TreeIndex(nodes, id_of=self.id_of, parent_of=parent_of, sort_key=self.sort_key)

    def serialize(
        self, nodes: Iterable[Any], *, root_tag: str, version: Optional[str] = None
    ) -> etree._Element:
        """Build the whole document: a root element holding every tree."""
        tree_index = self.index(nodes)
        root = root_element(root_tag, version)
        written = 0
        for node in tree_index.roots:
            element, count = self._write(node, tree_index, 0)
            root.append(element)
            written += count

        if written != tree_index.size:
            raise DataIntegrityError(
                f"{tree_index.size - written} of {tree_index.size} {self.element_tag} "
                "nodes are unreachable from any root (cyclic parent chain)"
            )
        logger.info("Serialized %d %s elements", written, self.element_tag)
        return root

    def write(self, node: Any, tree_index: TreeIndex, depth: int = 0) -> etree._Element:
        """Serialize ``node`` and all of its descendants."""
        element, _count = self._write(node, tree_index, depth)
        return element

    def _write(self, node: Any, tree_index: TreeIndex, depth: int) -> Tuple[etree._Element, int]:
        top = self._node_element(node)
        visited = {self.id_of(node)}
        pending = [(node, top, depth)]
        deepest = depth
        while pending:
            current, element, level = pending.pop()
            if self.children_tag is None:
                continue
            group = etree.SubElement(element, self.children_tag)
            for child in tree_index.children(self.id_of(current)):
                child_id = self.id_of(child)
                if child_id in visited:
                    raise DataIntegrityError(f"Node {child_id!r} reached twice (cycle)")
                visited.add(child_id)
                child_element = self._node_element(child)
                group.append(child_element)
                pending.append((child, child_element, level + 1))
                deepest = max(deepest, level + 1)
        logger.debug(
            "Wrote %s %r with %d descendants (depth %d)",
            self.element_tag,
            self.id_of(node),
            len(visited) - 1,
            deepest,
        )
        return top, len(visited)

    def _node_element(self, node: Any) -> etree._Element:
        element = etree.Element(self.element_tag)
        write_fields(element, self.fields, node)
        for group in self.leaf_groups:
            write_group(element, group, node)
        return element


def write_fields(parent: etree._Element, fields: Sequence[FieldDescriptor[Any]], item: Any) -> None:
    for descriptor in fields:
        try:
            value = descriptor.accessor(item)
        except Exception as exc:
            raise AccessorFault(descriptor.name, cause=exc) from exc
        etree.SubElement(parent, descriptor.name).text = xml_text(to_text(value))


def write_group(parent: etree._Element, group: LeafGroup, owner: Any) -> None:
    try:
        items = [item for item in group.items(owner) if not group.skip(item)]
    except Exception as exc:
        raise AccessorFault(group.tag, cause=exc) from exc
    if not items and group.omit_empty:
        return
    container = etree.SubElement(parent, group.tag)
    for item in items:
        item_element = etree.SubElement(container, group.item_tag)
        write_fields(item_element, group.fields, item)
        for nested in group.groups:
            write_group(item_element, nested, item)
