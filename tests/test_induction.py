"""Tests for the ID3 induction engine: attribute selection, recursion, and end-to-end scenarios."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from pytest_check import check

from id3tree.dataset import Dataset
from id3tree.exceptions import InvariantViolationError
from id3tree.induction import InductionConfig, best_attribute, induce
from id3tree.tree import DecisionNode, LeafNode, Tree, extract_rules, render_tree, tree_depth


class TestInductionConfig:
    """Tests for `InductionConfig` defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults should match the classic engine behavior."""
        # Act
        config = InductionConfig()

        # Assert
        with check:
            assert config.epsilon == 1e-6
        with check:
            assert config.unknown_value == "?"
        with check:
            assert config.fold_unknown_labels is True
        with check:
            assert config.require_positive_gain is False
        with check:
            assert config.label_sentinel == "?"

    def test_disabling_fold_clears_label_sentinel(self) -> None:
        """Without folding, the statistics functions should receive no sentinel."""
        # Act / Assert
        assert InductionConfig(fold_unknown_labels=False).label_sentinel is None

    def test_non_positive_epsilon_is_rejected(self) -> None:
        """Epsilon must be strictly positive."""
        # Act / Assert
        with pytest.raises(ValidationError):
            InductionConfig(epsilon=0.0)


class TestBestAttribute:
    """Tests for `best_attribute`: gain maximization and tie-breaking."""

    def test_picks_highest_gain_attribute(self) -> None:
        """The perfectly separating attribute should beat a noisy one."""
        # Arrange
        dataset = Dataset.from_records(
            [
                ["noise", "signal", "label"],
                ["a", "x", "yes"],
                ["b", "x", "yes"],
                ["a", "y", "no"],
                ["a", "y", "no"],
            ],
            label_position=2,
        )

        # Act / Assert
        assert best_attribute(dataset.rows, dataset, used_attributes=()) == "signal"

    def test_equal_gains_keep_first_attribute(self) -> None:
        """Among attributes with equal gain, the first in header order should win."""
        # Arrange
        dataset = Dataset.from_records(
            [["first", "second", "label"], ["a", "p", "yes"], ["b", "q", "no"]],
            label_position=2,
        )

        # Act / Assert
        assert best_attribute(dataset.rows, dataset, used_attributes=()) == "first"

    def test_used_attributes_are_skipped(self) -> None:
        """Attributes already on the path should never be chosen again."""
        # Arrange
        dataset = Dataset.from_records(
            [["first", "second", "label"], ["a", "p", "yes"], ["b", "q", "no"]],
            label_position=2,
        )

        # Act / Assert
        with check:
            assert best_attribute(dataset.rows, dataset, used_attributes=("first",)) == "second"
        with check:
            assert best_attribute(dataset.rows, dataset, used_attributes=("first", "second")) is None

    def test_zero_gain_attribute_is_chosen_by_default(self) -> None:
        """With the default config, a zero-gain attribute still qualifies when nothing beats it."""
        # Arrange
        dataset = _make_uninformative_dataset()

        # Act / Assert
        assert best_attribute(dataset.rows, dataset, used_attributes=()) == "weather"

    def test_zero_gain_attribute_is_rejected_when_positive_gain_required(self) -> None:
        """With `require_positive_gain`, no attribute should qualify."""
        # Arrange
        dataset = _make_uninformative_dataset()
        config = InductionConfig(require_positive_gain=True)

        # Act / Assert
        assert best_attribute(dataset.rows, dataset, used_attributes=(), config=config) is None


class TestInduce:
    """Tests for `induce`: the recursive ID3 build."""

    def test_perfect_split_scenario(self) -> None:
        """weather perfectly predicts play, so the root splits on weather into two pure leaves."""
        # Arrange
        dataset = Dataset.from_records(
            [["weather", "play"], ["sunny", "yes"], ["sunny", "yes"], ["rainy", "no"], ["rainy", "no"]],
            label_position=1,
        )

        # Act
        tree = induce(dataset)

        # Assert
        assert tree == DecisionNode(
            attribute="weather",
            children={"sunny": LeafNode(value="yes"), "rainy": LeafNode(value="no")},
        )

    def test_uniform_label_scenario(self) -> None:
        """When every row shares a label, the root is immediately a leaf."""
        # Arrange
        dataset = Dataset.from_records(
            [
                ["weather", "wind", "play"],
                ["sunny", "weak", "yes"],
                ["rainy", "strong", "yes"],
                ["foggy", "weak", "yes"],
            ],
            label_position=2,
        )

        # Act
        tree = induce(dataset)

        # Assert
        assert tree == LeafNode(value="yes")

    def test_zero_gain_split_scenario(self) -> None:
        """An uninformative only attribute is split on by default, then exhausted into majority leaves."""
        # Arrange
        dataset = _make_uninformative_dataset()

        # Act
        tree = induce(dataset)

        # Assert
        assert tree == DecisionNode(
            attribute="weather",
            children={"sunny": LeafNode(value="yes"), "rainy": LeafNode(value="yes")},
        )

    def test_zero_gain_split_is_skipped_when_positive_gain_required(self) -> None:
        """With `require_positive_gain`, the uninformative dataset yields a single majority leaf."""
        # Arrange
        dataset = _make_uninformative_dataset()

        # Act
        tree = induce(dataset, InductionConfig(require_positive_gain=True))

        # Assert
        assert tree == LeafNode(value="yes")

    def test_empty_partitions_produce_no_child(self) -> None:
        """Variants with no rows at a node should be absent from its children."""
        # Arrange
        dataset = Dataset.from_records(
            [
                ["a", "b", "label"],
                ["x", "p", "yes"],
                ["x", "q", "no"],
                ["y", "r", "yes"],
                ["y", "r", "no"],
            ],
            label_position=2,
        )

        # Act
        tree = induce(dataset)

        # Assert
        assert tree == DecisionNode(
            attribute="b",
            children={
                "p": LeafNode(value="yes"),
                "q": LeafNode(value="no"),
                "r": DecisionNode(attribute="a", children={"y": LeafNode(value="yes")}),
            },
        )

    def test_classic_tennis_tree(self) -> None:
        """The textbook play-tennis table should induce the textbook tree."""
        # Arrange
        dataset = _make_tennis_dataset()

        # Act
        rendered = render_tree(induce(dataset))

        # Assert
        assert rendered.splitlines() == [
            "outlook -> sunny",
            "  humidity -> high",
            "    no",
            "  humidity -> normal",
            "    yes",
            "outlook -> overcast",
            "  yes",
            "outlook -> rain",
            "  wind -> weak",
            "    yes",
            "  wind -> strong",
            "    no",
        ]

    def test_paths_use_distinct_attributes_and_keys_are_variants(self) -> None:
        """No attribute repeats on a path, paths are bounded by attribute count, keys are variants."""
        # Arrange
        dataset = _make_noisy_dataset()

        # Act
        tree = induce(dataset)

        # Assert
        for rule in extract_rules(tree):
            attributes = [condition.attribute for condition in rule.conditions]
            with check:
                assert len(attributes) == len(set(attributes))
            with check:
                assert len(attributes) <= len(dataset.attribute_names)
            for condition in rule.conditions:
                with check:
                    assert condition.variant in dataset.attribute_variants[condition.attribute]
        with check:
            assert tree_depth(tree) <= len(dataset.attribute_names)

    def test_induction_is_idempotent(self) -> None:
        """Re-running induction on the same dataset should yield an identical tree."""
        # Arrange
        dataset = _make_noisy_dataset()

        # Act
        first: Tree = induce(dataset)
        second: Tree = induce(dataset)

        # Assert
        with check:
            assert first == second
        with check:
            assert render_tree(first) == render_tree(second)

    def test_unknown_labels_do_not_block_pure_leaves(self) -> None:
        """A partition of one known label plus '?' rows should become a leaf with the known label."""
        # Arrange
        dataset = Dataset.from_records(
            [["weather", "play"], ["sunny", "yes"], ["sunny", "?"], ["rainy", "no"], ["rainy", "no"]],
            label_position=1,
        )

        # Act
        tree = induce(dataset)

        # Assert
        assert tree == DecisionNode(
            attribute="weather",
            children={"sunny": LeafNode(value="yes"), "rainy": LeafNode(value="no")},
        )

    def test_unknown_attribute_values_are_ordinary_variants(self) -> None:
        """A '?' attribute value should get its own branch like any other variant."""
        # Arrange
        dataset = Dataset.from_records(
            [["weather", "play"], ["sunny", "yes"], ["?", "no"], ["sunny", "yes"]],
            label_position=1,
        )

        # Act
        tree = induce(dataset)

        # Assert
        assert isinstance(tree, DecisionNode)
        assert list(tree.children) == ["sunny", "?"]

    def test_empty_dataset_raises(self) -> None:
        """Inducing on a dataset with no rows is a contract violation."""
        # Arrange
        dataset = Dataset.from_records([["weather", "play"]], label_position=1)

        # Act / Assert
        with pytest.raises(InvariantViolationError):
            induce(dataset)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_uninformative_dataset() -> Dataset:
    """Return a dataset whose only attribute leaves every label distribution unchanged.

    Returns:
        Dataset: Each weather value appears once with each label.
    """
    return Dataset.from_records(
        [["weather", "play"], ["sunny", "yes"], ["sunny", "no"], ["rainy", "yes"], ["rainy", "no"]],
        label_position=1,
    )


def _make_tennis_dataset() -> Dataset:
    """Return Quinlan's play-tennis table.

    Returns:
        Dataset: Four attributes and a yes/no `play` label in the last column.
    """
    return Dataset.from_records(
        [
            ["outlook", "temperature", "humidity", "wind", "play"],
            ["sunny", "hot", "high", "weak", "no"],
            ["sunny", "hot", "high", "strong", "no"],
            ["overcast", "hot", "high", "weak", "yes"],
            ["rain", "mild", "high", "weak", "yes"],
            ["rain", "cool", "normal", "weak", "yes"],
            ["rain", "cool", "normal", "strong", "no"],
            ["overcast", "cool", "normal", "strong", "yes"],
            ["sunny", "mild", "high", "weak", "no"],
            ["sunny", "cool", "normal", "weak", "yes"],
            ["rain", "mild", "normal", "weak", "yes"],
            ["sunny", "mild", "normal", "strong", "yes"],
            ["overcast", "mild", "high", "strong", "yes"],
            ["overcast", "hot", "normal", "weak", "yes"],
            ["rain", "mild", "high", "strong", "no"],
        ],
        label_position=4,
    )


def _make_noisy_dataset() -> Dataset:
    """Return a dataset with contradictory rows so some leaves are impure.

    Returns:
        Dataset: Three attributes with the label in the first column.
    """
    return Dataset.from_records(
        [
            ["label", "color", "size", "shape"],
            ["yes", "red", "small", "round"],
            ["no", "red", "small", "round"],
            ["yes", "blue", "large", "square"],
            ["no", "blue", "small", "square"],
            ["yes", "green", "large", "round"],
            ["yes", "green", "small", "square"],
            ["no", "red", "large", "square"],
            ["?", "blue", "large", "round"],
        ],
        label_position=0,
    )
