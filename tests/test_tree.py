"""Tests for the hierarchical markup serializer."""

from dataclasses import dataclass
from typing import List, Optional

import pytest

from catalog_export.descriptors import FieldDescriptor
from catalog_export.errors import AccessorFault, DataIntegrityError
from catalog_export.tree import HierarchicalTreeSerializer, LeafGroup, TreeIndex


@dataclass
class Leaf:
    product: str
    deleted: bool = False


@dataclass
class Node:
    id: int
    parent_id: Optional[int]
    name: str
    display_order: int = 0
    published: bool = True
    leaves: List[Leaf] = None

    def __post_init__(self):
        if self.leaves is None:
            self.leaves = []


def _serializer(**options):
    products = LeafGroup(
        tag="Products",
        item_tag="Product",
        fields=[FieldDescriptor("Name", lambda leaf: leaf.product)],
        items=lambda node: node.leaves,
        skip=lambda leaf: leaf.deleted,
    )
    params = dict(
        element_tag="Category",
        fields=[
            FieldDescriptor("Id", lambda n: n.id),
            FieldDescriptor("Name", lambda n: n.name),
            FieldDescriptor("Published", lambda n: n.published),
        ],
        id_of=lambda n: n.id,
        parent_of=lambda n: n.parent_id,
        leaf_groups=[products],
        children_tag="SubCategories",
        sort_key=lambda n: (n.display_order, n.id),
    )
    params.update(options)
    return HierarchicalTreeSerializer(**params)


def _abc():
    return [
        Node(1, None, "A", leaves=[Leaf("p1")]),
        Node(2, 1, "B", display_order=1, leaves=[Leaf("gone", deleted=True)]),
        Node(3, 1, "C", display_order=2, leaves=[Leaf("p3")]),
    ]


def test_three_category_scenario():
    root = _serializer().serialize(_abc(), root_tag="Categories", version="4.0")

    assert root.tag == "Categories"
    assert root.get("Version") == "4.0"
    (a,) = root.findall("Category")
    assert a.findtext("Name") == "A"
    assert [p.findtext("Name") for p in a.find("Products")] == ["p1"]

    b, c = a.find("SubCategories").findall("Category")
    assert (b.findtext("Name"), c.findtext("Name")) == ("B", "C")
    assert len(b.find("Products")) == 0
    assert [p.findtext("Name") for p in c.find("Products")] == ["p3"]
    assert len(b.find("SubCategories")) == 0


def test_every_node_appears_once_under_its_parent():
    nodes = [Node(1, None, "r1"), Node(2, None, "r2")]
    nodes += [Node(10 + i, 1, f"c{i}") for i in range(3)]
    nodes += [Node(20 + i, 11, f"g{i}") for i in range(4)]
    root = _serializer().serialize(nodes, root_tag="Categories")

    elements = list(root.iter("Category"))
    assert len(elements) == len(nodes)
    assert len({e.findtext("Id") for e in elements}) == len(nodes)
    for element in elements:
        parent = element.getparent()
        if parent.tag == "SubCategories":
            node = next(n for n in nodes if str(n.id) == element.findtext("Id"))
            assert parent.getparent().findtext("Id") == str(node.parent_id)


def test_children_follow_the_sort_key():
    nodes = [
        Node(1, None, "root"),
        Node(4, 1, "late", display_order=5),
        Node(3, 1, "early", display_order=1),
        Node(2, 1, "tie", display_order=5),
    ]
    root = _serializer().serialize(nodes, root_tag="Categories")
    names = [c.findtext("Name") for c in root.find("Category/SubCategories")]
    assert names == ["early", "tie", "late"]


def test_cycle_is_a_data_integrity_error():
    nodes = [Node(1, None, "root"), Node(2, 3, "x"), Node(3, 2, "y")]
    with pytest.raises(DataIntegrityError, match="unreachable"):
        _serializer().serialize(nodes, root_tag="Categories")


def test_unknown_parent_is_a_data_integrity_error():
    with pytest.raises(DataIntegrityError, match="unknown parent"):
        _serializer().serialize([Node(1, 99, "orphan")], root_tag="Categories")


def test_duplicate_id_is_a_data_integrity_error():
    with pytest.raises(DataIntegrityError, match="Duplicate"):
        TreeIndex([Node(1, None, "a"), Node(1, None, "b")], id_of=lambda n: n.id, parent_of=lambda n: n.parent_id)


def test_deep_chain_does_not_hit_the_recursion_limit():
    depth = 3000
    nodes = [Node(1, None, "n1")] + [Node(i, i - 1, f"n{i}") for i in range(2, depth + 1)]
    root = _serializer().serialize(nodes, root_tag="Categories")
    assert sum(1 for _ in root.iter("Category")) == depth


def test_empty_input_gives_an_empty_root():
    root = _serializer().serialize([], root_tag="Categories", version="4.0")
    assert len(root) == 0
    assert root.get("Version") == "4.0"


def test_flat_list_mode():
    serializer = _serializer(children_tag=None, sort_key=None)
    root = serializer.serialize([Node(1, None, "a"), Node(2, 1, "b")], root_tag="Categories")

    assert [c.findtext("Name") for c in root] == ["a", "b"]
    assert root.find("Category/SubCategories") is None


def test_scalar_text_rendering():
    node = Node(1, None, None, published=False)
    root = _serializer().serialize([node], root_tag="Categories")
    element = root.find("Category")
    assert element.findtext("Published") == "False"
    assert element.findtext("Name") == ""


def test_omit_empty_group():
    group = LeafGroup(
        tag="Products",
        item_tag="Product",
        fields=[FieldDescriptor("Name", lambda leaf: leaf.product)],
        items=lambda node: node.leaves,
        omit_empty=True,
    )
    root = _serializer(leaf_groups=[group]).serialize(
        [Node(1, None, "a"), Node(2, None, "b", leaves=[Leaf("p")])], root_tag="Categories"
    )
    a, b = root.findall("Category")
    assert a.find("Products") is None
    assert len(b.find("Products")) == 1


def test_nested_groups():
    values = LeafGroup("Values", "Value", [FieldDescriptor("V", lambda v: v)], lambda item: item["values"])
    group = LeafGroup(
        "Items",
        "Item",
        [FieldDescriptor("Name", lambda item: item["name"])],
        lambda node: [{"name": "i", "values": [1, 2]}],
        groups=[values],
    )
    root = _serializer(leaf_groups=[group]).serialize([Node(1, None, "a")], root_tag="Categories")
    assert [v.findtext("V") for v in root.find("Category/Items/Item/Values")] == ["1", "2"]


def test_field_failure_is_an_accessor_fault():
    serializer = _serializer(fields=[FieldDescriptor("Boom", lambda n: n.missing)])
    with pytest.raises(AccessorFault) as info:
        serializer.serialize([Node(1, None, "a")], root_tag="Categories")
    assert info.value.field == "Boom"
    assert isinstance(info.value.__cause__, AttributeError)
