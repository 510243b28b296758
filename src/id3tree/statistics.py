"""Entropy and information-gain statistics over row subsets.

All functions are pure: they take the current row subset and the owning
`Dataset` explicitly and never mutate either. Entropy uses the natural
logarithm, so values are in nats rather than bits. The unit does not change
which attribute maximizes information gain.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Final

from id3tree.dataset import Dataset, Row
from id3tree.exceptions import InvariantViolationError

UNKNOWN_VALUE: Final[str] = "?"  # Sentinel marking an unknown observation.

# ---------------------------------------------------------------------------
# Public interface -- Label statistics
# ---------------------------------------------------------------------------


def label_counts(rows: Sequence[Row], dataset: Dataset) -> dict[str, int]:
    """Count rows per label value.

    Args:
        rows (Sequence[Row]): The row subset to count.
        dataset (Dataset): The dataset the rows belong to.

    Returns:
        dict[str, int]: One entry per label variant of `dataset`, in
            first-seen order, including variants with a count of zero.

    Raises:
        InvariantViolationError: If a row carries a label the dataset never declared.
    """
    counts = dict.fromkeys(dataset.label_variants, 0)
    for row in rows:
        if row.label not in counts:
            raise InvariantViolationError(f"Row label {row.label!r} is not a label variant of the dataset")
        counts[row.label] += 1
    return counts


def most_common_label(
    rows: Sequence[Row],
    dataset: Dataset,
    *,
    unknown_value: str | None = UNKNOWN_VALUE,
) -> str:
    """Return the most frequent label of a row subset.

    Ties go to the label seen first in the dataset. When `unknown_value` is
    set, that sentinel is only returned if every row in the subset carries it.

    Args:
        rows (Sequence[Row]): A non-empty row subset.
        dataset (Dataset): The dataset the rows belong to.
        unknown_value (str | None): Label sentinel that never wins against a
            known label. `None` treats every label as ordinary.

    Returns:
        str: The predicted label for the subset.

    Raises:
        InvariantViolationError: If `rows` is empty.
    """
    return _most_common(label_counts(rows, dataset), unknown_value)


def entropy(
    rows: Sequence[Row],
    dataset: Dataset,
    *,
    unknown_value: str | None = UNKNOWN_VALUE,
) -> float:
    """Compute the Shannon entropy (natural log) of a row subset's labels.

    Rows labelled with `unknown_value` are first folded into the most common
    known label, so missing labels never raise the impurity of a subset.

    Args:
        rows (Sequence[Row]): A non-empty row subset.
        dataset (Dataset): The dataset the rows belong to.
        unknown_value (str | None): Label sentinel to fold away before the
            sum. `None` disables folding.

    Returns:
        float: Entropy in nats; 0.0 for a label-pure subset.

    Raises:
        InvariantViolationError: If `rows` is empty.

    Examples:
        >>> dataset = Dataset.from_records([["a", "y"], ["x", "1"], ["x", "0"]], label_position=1)
        >>> round(entropy(dataset.rows, dataset), 6)
        0.693147
    """
    return _entropy_of_counts(label_counts(rows, dataset), unknown_value)


# ---------------------------------------------------------------------------
# Public interface -- Partitioning and information gain
# ---------------------------------------------------------------------------


def partition_by_attribute(
    rows: Sequence[Row],
    attribute: str,
    dataset: Dataset,
) -> dict[str, list[Row]]:
    """Split a row subset by the value each row holds for `attribute`.

    Args:
        rows (Sequence[Row]): The row subset to split.
        attribute (str): Attribute to split on.
        dataset (Dataset): The dataset the rows belong to.

    Returns:
        dict[str, list[Row]]: One entry per variant of `attribute`, in
            first-seen order. Variants with no matching rows map to an empty list.

    Raises:
        InvariantViolationError: If `attribute` is not declared by the dataset,
            or a row lacks it or holds an undeclared variant.
    """
    if attribute not in dataset.attribute_variants:
        raise InvariantViolationError(f"Attribute {attribute!r} is not declared by the dataset")
    partitions: dict[str, list[Row]] = {variant: [] for variant in dataset.attribute_variants[attribute]}
    for row in rows:
        value = row.values.get(attribute)
        if value is None or value not in partitions:
            raise InvariantViolationError(f"Row value {value!r} is not a declared variant of attribute {attribute!r}")
        partitions[value].append(row)
    return partitions


def information_gain(
    rows: Sequence[Row],
    attribute: str,
    dataset: Dataset,
    *,
    unknown_value: str | None = UNKNOWN_VALUE,
) -> float:
    """Compute the entropy reduction achieved by splitting `rows` on `attribute`.

    Empty partitions contribute nothing and are skipped.

    Args:
        rows (Sequence[Row]): A non-empty row subset.
        attribute (str): Attribute to evaluate.
        dataset (Dataset): The dataset the rows belong to.
        unknown_value (str | None): Label sentinel folded away in every
            entropy term. `None` disables folding.

    Returns:
        float: `H(rows)` minus the size-weighted entropy of each non-empty partition.

    Raises:
        InvariantViolationError: If `rows` is empty.
    """
    original_entropy = entropy(rows, dataset, unknown_value=unknown_value)
    total = len(rows)
    weighted_entropy = sum(
        len(partition) / total * entropy(partition, dataset, unknown_value=unknown_value)
        for partition in partition_by_attribute(rows, attribute, dataset).values()
        if partition
    )
    return original_entropy - weighted_entropy


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _most_common(counts: Mapping[str, int], unknown_value: str | None) -> str:
    """Pick the first label with the highest count, preferring known labels.

    Args:
        counts (Mapping[str, int]): Label counts in tie-break order.
        unknown_value (str | None): Sentinel that only wins when nothing else is present.

    Returns:
        str: The most common label.

    Raises:
        InvariantViolationError: If every count is zero.
    """
    present = [(label, count) for label, count in counts.items() if count > 0]
    if not present:
        raise InvariantViolationError("Most common label is undefined for an empty row subset")
    known = [(label, count) for label, count in present if label != unknown_value]
    # max() keeps the first of equally large items
    label, _ = max(known or present, key=lambda item: item[1])
    return label


def _fold_unknown(counts: Mapping[str, int], unknown_value: str | None) -> dict[str, int]:
    """Move the sentinel's count onto the most common known label.

    Args:
        counts (Mapping[str, int]): Label counts in tie-break order.
        unknown_value (str | None): Sentinel to fold; `None` returns a copy.

    Returns:
        dict[str, int]: Counts without the sentinel, unless the sentinel is
            the only label present.
    """
    folded = dict(counts)
    if unknown_value is None or folded.get(unknown_value, 0) == 0:
        folded.pop(unknown_value, None)
        return folded
    target = _most_common(folded, unknown_value)
    if target != unknown_value:
        folded[target] += folded.pop(unknown_value)
    return folded


def _entropy_of_counts(counts: Mapping[str, int], unknown_value: str | None) -> float:
    """Compute natural-log entropy from label counts.

    Args:
        counts (Mapping[str, int]): Label counts, zero counts allowed.
        unknown_value (str | None): Sentinel to fold before summing.

    Returns:
        float: Entropy in nats.

    Raises:
        InvariantViolationError: If every count is zero.
    """
    distribution = _fold_unknown(counts, unknown_value)
    total = sum(distribution.values())
    if total == 0:
        raise InvariantViolationError("Entropy is undefined for an empty row subset")
    result = 0.0
    for count in distribution.values():
        if count > 0:
            fraction = count / total
            result -= fraction * math.log(fraction)
    return result
