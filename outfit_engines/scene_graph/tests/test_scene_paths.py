"""Tests for path addressing."""
import pytest

from outfit_engines.common.errors import PathUnreachable
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import (
    compute_path,
    find_ambiguous_names,
    is_descendant,
    resolve_path,
)


def _avatar() -> SceneNode:
    return SceneNode(
        name="Avatar",
        children=[
            SceneNode(name="Body", has_renderable_surface=True),
            SceneNode(
                name="Outfits",
                children=[
                    SceneNode(name="Shirt", children=[SceneNode(name="Sleeves")]),
                    SceneNode(name="Jacket", active=False),
                ],
            ),
        ],
    )


def test_compute_path_nested():
    root = _avatar()
    sleeves = root.children[1].children[0].children[0]
    assert compute_path(root, sleeves) == "Outfits/Shirt/Sleeves"


def test_compute_path_of_root_is_empty():
    root = _avatar()
    assert compute_path(root, root) == ""


def test_compute_path_relative_to_subfolder():
    root = _avatar()
    outfits = root.children[1]
    jacket = outfits.children[1]
    assert compute_path(outfits, jacket) == "Jacket"


def test_compute_path_outside_root_raises():
    root = _avatar()
    stray = SceneNode(name="Stray", children=[SceneNode(name="Hat")])
    with pytest.raises(PathUnreachable):
        compute_path(root, stray.children[0])


def test_resolve_path_roundtrip_and_missing():
    root = _avatar()
    node = resolve_path(root, "Outfits/Shirt/Sleeves")
    assert node is root.children[1].children[0].children[0]
    assert resolve_path(root, "") is root
    assert resolve_path(root, "Outfits/Pants") is None
    assert resolve_path(root, "Nope/Shirt") is None


def test_resolve_path_first_sibling_wins():
    first = SceneNode(name="Hat", active=True)
    second = SceneNode(name="Hat", active=False)
    root = SceneNode(name="Avatar", children=[first, second])
    assert resolve_path(root, "Hat") is first
    assert find_ambiguous_names(root) == [("", "Hat")]


def test_parent_links_follow_add_child():
    root = _avatar()
    hat = SceneNode(name="Hat")
    outfits = root.children[1]
    outfits.add_child(hat)
    assert hat.parent is outfits
    assert compute_path(root, hat) == "Outfits/Hat"

    # Re-parenting detaches from the previous parent.
    root.add_child(hat)
    assert hat.parent is root
    assert all(c is not hat for c in outfits.children)
    assert compute_path(root, hat) == "Hat"


def test_is_descendant():
    root = _avatar()
    assert is_descendant(root, root.children[1].children[1])
    assert not is_descendant(root.children[0], root.children[1])


def test_nodes_compare_by_identity():
    a = SceneNode(name="Hat")
    b = SceneNode(name="Hat")
    assert a != b
    assert a == a
    assert len({a, b}) == 2


def test_snapshot_from_json_links_parents():
    root = SceneNode.model_validate(
        {"name": "Avatar", "children": [{"name": "Outfits", "children": [{"name": "Shirt"}]}]}
    )
    shirt = resolve_path(root, "Outfits/Shirt")
    assert shirt is not None
    assert shirt.parent.parent is root
    assert "_parent" not in root.model_dump()
