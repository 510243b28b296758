"""Tree models produced by induction, plus rendering and inspection helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class LeafNode(BaseModel):
    """A terminal node holding the predicted label.

    Attributes:
        kind (Literal["leaf"]): Discriminator field; always `"leaf"`.
        value (str): Predicted label for rows reaching this node.

    Examples:
        >>> str(LeafNode(value="yes"))
        'yes'
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = Field(default="leaf", description='Discriminator field. Always "leaf".')
    value: str = Field(description="Predicted label for rows reaching this node.")

    def __str__(self) -> str:
        """Return the indented text rendering of this subtree.

        Returns:
            str: See `render_tree`.
        """
        return render_tree(self)


class DecisionNode(BaseModel):
    """An internal node routing rows to children by the value of one attribute.

    Variants without training rows at this node have no child.

    Attributes:
        kind (Literal["decision"]): Discriminator field; always `"decision"`.
        attribute (str): Attribute this node splits on.
        children (dict[str, Tree]): Child subtree per attribute variant, in
            the dataset's first-seen variant order.

    Examples:
        >>> node = DecisionNode(
        ...     attribute="weather",
        ...     children={"sunny": LeafNode(value="yes"), "rainy": LeafNode(value="no")},
        ... )
        >>> print(node)
        weather -> sunny
          yes
        weather -> rainy
          no
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["decision"] = Field(default="decision", description='Discriminator field. Always "decision".')
    attribute: str = Field(description="Attribute this node splits on.")
    children: dict[str, Annotated[LeafNode | DecisionNode, Field(discriminator="kind")]] = Field(
        description="Child subtree per attribute variant that had training rows at this node.",
    )

    def __str__(self) -> str:
        """Return the indented text rendering of this subtree.

        Returns:
            str: See `render_tree`.
        """
        return render_tree(self)


# Use this alias when accepting any node; Pydantic will select the correct model automatically.
type Tree = Annotated[LeafNode | DecisionNode, Field(discriminator="kind")]


class Condition(BaseModel):
    """One routing step on the path from the root to a leaf.

    Attributes:
        attribute (str): Attribute tested by the decision node.
        variant (str): Value the path follows.
    """

    model_config = ConfigDict(frozen=True)

    attribute: str
    variant: str

    def __str__(self) -> str:
        """Return the condition as `"<attribute> -> <variant>"`.

        Returns:
            str: Human-readable condition.
        """
        return f"{self.attribute} -> {self.variant}"


class TreeRule(BaseModel):
    """The conditions leading to one leaf and the label it predicts.

    Attributes:
        conditions (list[Condition]): Steps from the root to the leaf. Empty
            when the whole tree is a single leaf.
        prediction (str): Label predicted at the leaf.
    """

    model_config = ConfigDict(frozen=True)

    conditions: list[Condition]
    prediction: str


# ---------------------------------------------------------------------------
# Public interface -- Rendering
# ---------------------------------------------------------------------------


def render_tree(tree: Tree, *, indent: str = "  ") -> str:
    """Render a tree as indented text.

    A leaf renders as its label. A decision node renders one
    `"<attribute> -> <variant>"` line per child followed by that child,
    indented one extra level.

    Args:
        tree (Tree): The tree to render.
        indent (str): Text prepended once per depth level. Defaults to two spaces.

    Returns:
        str: The rendering, without a trailing newline.
    """
    lines: list[str] = []
    _render_lines(tree, level=0, indent=indent, lines=lines)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Public interface -- Inspection
# ---------------------------------------------------------------------------


def tree_depth(tree: Tree) -> int:
    """Return the number of decision nodes on the longest root-to-leaf path.

    Args:
        tree (Tree): The tree to measure.

    Returns:
        int: 0 for a single leaf.
    """
    if isinstance(tree, LeafNode):
        return 0
    return 1 + max((tree_depth(child) for child in tree.children.values()), default=0)


def leaf_count(tree: Tree) -> int:
    """Return the number of leaves in the tree.

    Args:
        tree (Tree): The tree to count.

    Returns:
        int: Number of `LeafNode` instances reachable from `tree`.
    """
    if isinstance(tree, LeafNode):
        return 1
    return sum(leaf_count(child) for child in tree.children.values())


def extract_rules(tree: Tree) -> list[TreeRule]:
    """Flatten a tree into one rule per leaf, in rendering order.

    Args:
        tree (Tree): The tree to flatten.

    Returns:
        list[TreeRule]: Root-to-leaf conditions and prediction for every leaf.
    """
    rules: list[TreeRule] = []
    _walk_tree(tree, path=[], rules=rules)
    return rules


def classify(tree: Tree, values: Mapping[str, str]) -> str | None:
    """Route one observation down the tree.

    Args:
        tree (Tree): A tree produced by induction.
        values (Mapping[str, str]): Attribute name to observed value.

    Returns:
        str | None: The label of the leaf reached, or `None` when the
            observation lacks a tested attribute or holds a variant the
            tree has no child for.
    """
    node = tree
    while isinstance(node, DecisionNode):
        value = values.get(node.attribute)
        if value is None or value not in node.children:
            return None
        node = node.children[value]
    return node.value


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _render_lines(tree: Tree, *, level: int, indent: str, lines: list[str]) -> None:
    prefix = indent * level
    if isinstance(tree, LeafNode):
        lines.append(f"{prefix}{tree.value}")
        return
    for variant, child in tree.children.items():
        lines.append(f"{prefix}{tree.attribute} -> {variant}")
        _render_lines(child, level=level + 1, indent=indent, lines=lines)


def _walk_tree(tree: Tree, *, path: list[Condition], rules: list[TreeRule]) -> None:
    if isinstance(tree, LeafNode):
        rules.append(TreeRule(conditions=path, prediction=tree.value))
        return
    for variant, child in tree.children.items():
        _walk_tree(child, path=[*path, Condition(attribute=tree.attribute, variant=variant)], rules=rules)
