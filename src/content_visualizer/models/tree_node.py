"""Tree node model for hierarchical document display."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class TreeNode:
    """
    Generic node of a hierarchical document built from a nested format.

    A node is either a leaf carrying a scalar ``value`` or a branch carrying
    ordered ``children``, never both. A node with neither is a leaf whose
    scalar is empty.
    """

    key: str
    value: Optional[str] = None
    type_hint: Optional[str] = None
    children: Optional[List['TreeNode']] = None

    def __post_init__(self):
        """Validate node after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate node integrity."""
        if self.key is None:
            raise ValueError("key cannot be None")

        if self.children is not None and not isinstance(self.children, list):
            raise ValueError("children must be a list")

        if self.value is not None and self.children:
            raise ValueError(f"node '{self.key}' cannot carry both a value and children")

    @property
    def has_value(self) -> bool:
        """Check if this node carries a non-empty scalar."""
        return bool(self.value)

    def is_leaf(self) -> bool:
        """Check if this is a leaf node (no children)."""
        return not self.children

    def add_child(self, child: 'TreeNode') -> None:
        """Append a child node, turning this node into a branch."""
        if self.value is not None:
            raise ValueError(f"node '{self.key}' already carries a value")
        if self.children is None:
            self.children = []
        self.children.append(child)

    def find(self, *path: str) -> Optional['TreeNode']:
        """
        Find a descendant by its sequence of keys.

        Args:
            path: Keys to follow from this node, e.g. ``find("users", "[0]", "name")``

        Returns:
            The matching TreeNode or None
        """
        node = self
        for key in path:
            match = next((child for child in node.children or [] if child.key == key), None)
            if match is None:
                return None
            node = match
        return node

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, 'TreeNode']]:
        """Yield (depth, node) pairs in document order."""
        stack = [(depth, self)]
        while stack:
            level, node = stack.pop()
            yield level, node
            stack.extend((level + 1, child) for child in reversed(node.children or []))

    def count_nodes(self) -> int:
        """Count this node and all its descendants."""
        return sum(1 for _ in self.walk())

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary for JSON serialization."""
        result: Dict[str, Any] = {"key": self.key}
        if self.value is not None:
            result["value"] = self.value
        if self.type_hint is not None:
            result["typeHint"] = self.type_hint
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def render(self, indent: str = "  ") -> str:
        """Render the tree as indented text, one node per line."""
        lines = []
        for depth, node in self.walk():
            parts = [node.key]
            if node.type_hint:
                parts.append(node.type_hint)
            line = " ".join(parts)
            if node.value is not None:
                line = f"{line}: {node.value}"
            lines.append(f"{indent * depth}{line}")
        return "\n".join(lines)
