"""Live scene snapshot models (NodeRef side of the path boundary)."""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, PrivateAttr


class SceneNode(BaseModel):
    """A node of the host's scene snapshot.

    Nodes are compared by identity, never by value: two siblings with the same
    name and flags are still different nodes. The parent link is a private
    back-reference rebuilt whenever children are attached, so it never shows up
    in dumps. Slot stores only ever hold path strings derived from these nodes.
    """

    name: str
    id: Optional[str] = None
    active: bool = True
    has_renderable_surface: bool = False
    # Host flags that exclude a node from classification (not its children).
    editor_only: bool = False
    hidden: bool = False
    not_editable: bool = False
    blend_weights: Dict[str, float] = Field(default_factory=dict)
    children: List[SceneNode] = Field(default_factory=list)

    _parent: Optional[SceneNode] = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        for child in self.children:
            child._parent = self

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    @property
    def parent(self) -> Optional[SceneNode]:
        return self._parent

    def add_child(self, child: SceneNode) -> SceneNode:
        old_parent = child._parent
        if old_parent is not None and old_parent is not self:
            old_parent.children = [c for c in old_parent.children if c is not child]
        if not any(c is child for c in self.children):
            self.children.append(child)
        child._parent = self
        return child

    def find_child(self, name: str) -> Optional[SceneNode]:
        """First child with this name in native child order."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def iter_descendants(self) -> Iterator[SceneNode]:
        """Depth-first, pre-order, excluding self."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()


SceneNode.model_rebuild()
