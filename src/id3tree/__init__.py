"""id3tree: ID3 classification trees for categorical tables."""

from loguru import logger

from id3tree.dataset import Dataset, Row, read_dataset
from id3tree.induction import InductionConfig, best_attribute, induce
from id3tree.logging import PACKAGE_NAME, enable_logging
from id3tree.tree import DecisionNode, LeafNode, Tree, render_tree

logger.disable(PACKAGE_NAME)  # noqa: RUF067 - Disable logging for the id3tree package by default

__all__ = [
    "Dataset",
    "DecisionNode",
    "InductionConfig",
    "LeafNode",
    "Row",
    "Tree",
    "best_attribute",
    "enable_logging",
    "induce",
    "read_dataset",
    "render_tree",
]
