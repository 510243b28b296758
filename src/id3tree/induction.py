"""ID3 induction: grow a classification tree by maximizing information gain."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from id3tree.dataset import Dataset, Row
from id3tree.exceptions import InvariantViolationError
from id3tree.logging import SPLIT_LEVEL
from id3tree.statistics import (
    UNKNOWN_VALUE,
    entropy,
    information_gain,
    most_common_label,
    partition_by_attribute,
)
from id3tree.tree import DecisionNode, LeafNode, Tree, leaf_count, tree_depth

# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class InductionConfig(BaseModel):
    """Tunable behavior of the induction engine.

    Attributes:
        epsilon (float): Entropy at or below this magnitude is treated as a
            label-pure subset, absorbing floating-point noise.
        unknown_value (str): Sentinel marking an unknown value.
        fold_unknown_labels (bool): When true, rows labelled with
            `unknown_value` count toward the most common known label in every
            entropy computation, and leaves never predict the sentinel while a
            known label is present. When false, the sentinel is an ordinary label.
        require_positive_gain (bool): When true, an attribute whose gain does
            not exceed `epsilon` is never split on and the node becomes a leaf.
            When false, a zero-gain attribute is still chosen if it is the
            first unused attribute and nothing scores higher.

    Examples:
        >>> InductionConfig().epsilon
        1e-06
        >>> InductionConfig(require_positive_gain=True).require_positive_gain
        True
    """

    model_config = ConfigDict(frozen=True)

    epsilon: float = Field(
        default=1e-6,
        gt=0.0,
        description="Entropy magnitude at or below which a subset is treated as label-pure.",
    )
    unknown_value: str = Field(
        default=UNKNOWN_VALUE,
        description="Sentinel marking an unknown value.",
    )
    fold_unknown_labels: bool = Field(
        default=True,
        description="Fold unknown labels into the most common known label before computing entropy.",
    )
    require_positive_gain: bool = Field(
        default=False,
        description="Refuse to split on attributes whose information gain does not exceed epsilon.",
    )

    @property
    def label_sentinel(self) -> str | None:
        """Return the sentinel passed to the statistics functions.

        Returns:
            str | None: `unknown_value` when folding is enabled, otherwise `None`.
        """
        return self.unknown_value if self.fold_unknown_labels else None


# ---------------------------------------------------------------------------
# Public interface
# ---------------------------------------------------------------------------


def induce(dataset: Dataset, config: InductionConfig | None = None) -> Tree:
    """Grow an ID3 classification tree from every row of a dataset.

    Args:
        dataset (Dataset): The training data.
        config (InductionConfig | None): Engine settings. Defaults to
            `InductionConfig()`.

    Returns:
        Tree: The root of the induced tree.

    Raises:
        InvariantViolationError: If the dataset has no rows.

    Examples:
        >>> dataset = Dataset.from_records(
        ...     [["weather", "play"], ["sunny", "yes"], ["sunny", "yes"], ["rainy", "no"], ["rainy", "no"]],
        ...     label_position=1,
        ... )
        >>> print(induce(dataset))
        weather -> sunny
          yes
        weather -> rainy
          no
    """
    config = config or InductionConfig()
    if not dataset.rows:
        raise InvariantViolationError("Cannot induce a tree from a dataset with no rows")

    tree = _induce_node(dataset.rows, dataset, used_attributes=(), config=config)
    logger.info(
        "Induction finished",
        rows=len(dataset.rows),
        depth=tree_depth(tree),
        leaves=leaf_count(tree),
    )
    return tree


def best_attribute(
    rows: Sequence[Row],
    dataset: Dataset,
    used_attributes: Sequence[str],
    config: InductionConfig | None = None,
) -> str | None:
    """Choose the unused attribute with the highest information gain.

    Attributes are scanned in dataset order and a later attribute replaces
    the current candidate only with a strictly higher gain, so the first of
    equally good attributes wins.

    Args:
        rows (Sequence[Row]): A non-empty row subset.
        dataset (Dataset): The dataset the rows belong to.
        used_attributes (Sequence[str]): Attributes already split on along
            the current path.
        config (InductionConfig | None): Engine settings. Defaults to
            `InductionConfig()`.

    Returns:
        str | None: The chosen attribute, or `None` when no unused attribute qualifies.
    """
    selection = _select_attribute(rows, dataset, used_attributes, config or InductionConfig())
    return selection[0] if selection is not None else None


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _induce_node(
    rows: Sequence[Row],
    dataset: Dataset,
    *,
    used_attributes: tuple[str, ...],
    config: InductionConfig,
) -> Tree:
    """Build the subtree for one non-empty row subset."""
    sentinel = config.label_sentinel
    if abs(entropy(rows, dataset, unknown_value=sentinel)) <= config.epsilon:
        return _make_leaf(rows, dataset, depth=len(used_attributes), config=config)

    selection = _select_attribute(rows, dataset, used_attributes, config)
    if selection is None:
        return _make_leaf(rows, dataset, depth=len(used_attributes), config=config)

    attribute, gain = selection
    logger.log(
        SPLIT_LEVEL,
        "Split chosen",
        attribute=attribute,
        gain=round(gain, 6),
        depth=len(used_attributes),
        rows=len(rows),
    )
    child_attributes = (*used_attributes, attribute)
    # Variants with no rows here get no child.
    children = {
        variant: _induce_node(partition, dataset, used_attributes=child_attributes, config=config)
        for variant, partition in partition_by_attribute(rows, attribute, dataset).items()
        if partition
    }
    return DecisionNode(attribute=attribute, children=children)


def _select_attribute(
    rows: Sequence[Row],
    dataset: Dataset,
    used_attributes: Sequence[str],
    config: InductionConfig,
) -> tuple[str, float] | None:
    """Return the winning attribute together with its gain."""
    best: tuple[str, float] | None = None
    for attribute in dataset.attribute_names:
        if attribute in used_attributes:
            continue
        gain = information_gain(rows, attribute, dataset, unknown_value=config.label_sentinel)
        if best is None:
            qualifies = gain > config.epsilon if config.require_positive_gain else gain >= 0.0
        else:
            qualifies = gain > best[1]
        if qualifies:
            best = (attribute, gain)
    return best


def _make_leaf(rows: Sequence[Row], dataset: Dataset, *, depth: int, config: InductionConfig) -> LeafNode:
    """Terminate a branch with the most common label of its rows."""
    value = most_common_label(rows, dataset, unknown_value=config.label_sentinel)
    logger.debug("Leaf created", value=value, depth=depth, rows=len(rows))
    return LeafNode(value=value)
