"""Training dataset models and loaders.

A `Dataset` is the application-oriented form of a parsed delimited table:
one designated label column plus any number of categorical attribute
columns. Every field is kept verbatim as a string, so values that differ only
by surrounding whitespace are distinct variants, and the unknown sentinel
(`"?"`) is an ordinary variant at this stage.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import polars as pl
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator

from id3tree.exceptions import (
    DatasetReadError,
    DuplicateColumnsError,
    LabelColumnError,
    MalformedRecordError,
)

# ---------------------------------------------------------------------------
# Public models
# ---------------------------------------------------------------------------


class Row(BaseModel):
    """One observation: a label value plus the value of every attribute.

    Attributes:
        label (str): Value of the label column for this observation.
        values (dict[str, str]): Mapping of attribute name to observed value.

    Examples:
        >>> row = Row(label="yes", values={"weather": "sunny", "wind": "?"})
        >>> row.values["weather"]
        'sunny'
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Value of the label column for this observation.")
    values: dict[str, str] = Field(description="Mapping of attribute name to observed value.")


class Dataset(BaseModel):
    """A fully parsed training table.

    Variant tuples hold distinct values in first-seen order; that order drives
    every tie-break during induction and the child order of rendered trees.

    Attributes:
        attribute_names (tuple[str, ...]): Attribute column names in header
            order, excluding the label column.
        attribute_variants (dict[str, tuple[str, ...]]): Distinct observed
            values per attribute, in first-seen order.
        label_name (str): Name of the label column.
        label_variants (tuple[str, ...]): Distinct observed label values, in
            first-seen order.
        rows (tuple[Row, ...]): Observations in file order.

    Examples:
        >>> dataset = Dataset.from_records(
        ...     [["weather", "play"], ["sunny", "yes"], ["rainy", "no"]],
        ...     label_position=1,
        ... )
        >>> dataset.attribute_variants
        {'weather': ('sunny', 'rainy')}
        >>> dataset.label_variants
        ('yes', 'no')
    """

    model_config = ConfigDict(frozen=True)

    attribute_names: tuple[str, ...] = Field(
        description="Attribute column names in header order, excluding the label column.",
    )
    attribute_variants: dict[str, tuple[str, ...]] = Field(
        description="Distinct observed values per attribute, in first-seen order.",
    )
    label_name: str = Field(description="Name of the label column.")
    label_variants: tuple[str, ...] = Field(description="Distinct observed label values, in first-seen order.")
    rows: tuple[Row, ...] = Field(description="Observations in file order.")

    @model_validator(mode="after")
    def _validate_rows_match_schema(self) -> Dataset:
        """Validate that every row carries exactly the declared attributes and a known label.

        Returns:
            Dataset: The validated model instance.

        Raises:
            ValueError: If a row's attribute keys differ from `attribute_names`,
                or its label is not among `label_variants`.
        """
        expected_keys = set(self.attribute_names)
        known_labels = set(self.label_variants)
        for index, row in enumerate(self.rows):
            if set(row.values) != expected_keys:
                raise ValueError(
                    f"Row {index} has attributes {sorted(row.values)}, expected {sorted(expected_keys)}"
                )
            if row.label not in known_labels:
                raise ValueError(f"Row {index} has label {row.label!r} which is not a declared label variant")
        return self

    @model_validator(mode="after")
    def _validate_variants_match_rows(self) -> Dataset:
        """Validate that variant tuples hold exactly the distinct values seen in the rows.

        Returns:
            Dataset: The validated model instance.

        Raises:
            ValueError: If `attribute_variants` is keyed differently from
                `attribute_names`, any variant tuple repeats a value, or any
                variant tuple differs from the values observed in `rows`.
        """
        if list(self.attribute_variants) != list(self.attribute_names):
            raise ValueError("attribute_variants must be keyed by attribute_names in the same order")
        if len(set(self.label_variants)) != len(self.label_variants):
            raise ValueError("label_variants must not repeat a value")
        if set(self.label_variants) != {row.label for row in self.rows}:
            raise ValueError("label_variants must equal the set of labels observed in rows")
        for name, variants in self.attribute_variants.items():
            if len(set(variants)) != len(variants):
                raise ValueError(f"Variants of attribute {name!r} must not repeat a value")
            if set(variants) != {row.values[name] for row in self.rows}:
                raise ValueError(f"Variants of attribute {name!r} must equal the values observed in rows")
        return self

    @classmethod
    def from_records(
        cls,
        records: Iterable[Sequence[str | None]],
        label_position: int,
    ) -> Dataset:
        """Build a Dataset from raw string records whose first record is the header.

        Variant tuples are filled incrementally while records are scanned: a
        value joins its variant tuple the first time it is seen.

        Args:
            records (Iterable[Sequence[str | None]]): Header record followed by
                data records. `None` marks a field the parser could not supply.
            label_position (int): 0-based index of the label column.

        Returns:
            Dataset: The parsed dataset.

        Raises:
            LabelColumnError: If `label_position` does not index a header column.
            DuplicateColumnsError: If the header repeats a column name.
            MalformedRecordError: If the header has a missing name, or a data
                record's field count differs from the header or a field is missing.
        """
        record_iter = iter(records)
        raw_header = list(next(record_iter, []))
        if any(name is None for name in raw_header):
            raise MalformedRecordError(
                record_index=0,
                expected_fields=len(raw_header),
                actual_fields=sum(name is not None for name in raw_header),
            )
        header = [str(name) for name in raw_header]
        if not 0 <= label_position < len(header):
            raise LabelColumnError(label_position=label_position, column_count=len(header))
        if len(set(header)) != len(header):
            raise DuplicateColumnsError(columns=header)

        label_name = header[label_position]
        attribute_names = [name for position, name in enumerate(header) if position != label_position]
        # dicts double as insertion-ordered sets
        attribute_variants: dict[str, dict[str, None]] = {name: {} for name in attribute_names}
        label_variants: dict[str, None] = {}
        rows: list[Row] = []

        for record_index, record in enumerate(record_iter, start=1):
            fields = list(record)
            present = sum(field is not None for field in fields)
            if len(fields) != len(header) or present != len(header):
                raise MalformedRecordError(
                    record_index=record_index,
                    expected_fields=len(header),
                    actual_fields=present,
                )
            label = str(fields[label_position])
            values = {
                name: str(field)
                for name, field in zip(header, fields, strict=True)
                if name != label_name
            }
            label_variants.setdefault(label, None)
            for name, value in values.items():
                attribute_variants[name].setdefault(value, None)
            rows.append(Row(label=label, values=values))

        return cls(
            attribute_names=tuple(attribute_names),
            attribute_variants={name: tuple(variants) for name, variants in attribute_variants.items()},
            label_name=label_name,
            label_variants=tuple(label_variants),
            rows=tuple(rows),
        )

    @classmethod
    def from_frame(cls, df: pl.DataFrame, label_position: int) -> Dataset:
        """Build a Dataset from a polars DataFrame.

        Non-string columns are cast to `pl.String` first so every variant is
        compared by string identity.

        Args:
            df (pl.DataFrame): Source table; column names form the header.
            label_position (int): 0-based index of the label column.

        Returns:
            Dataset: The parsed dataset.
        """
        string_df = df.select(pl.all().cast(pl.String))
        return cls.from_records([string_df.columns, *string_df.iter_rows()], label_position)


# ---------------------------------------------------------------------------
# Public interface -- File loading
# ---------------------------------------------------------------------------


def read_dataset(
    path: str | Path,
    label_position: int,
    *,
    separator: str = ",",
) -> Dataset:
    """Read a delimited text file with a header row into a Dataset.

    The header is read as an ordinary record so column names stay verbatim,
    repeated names included. A record with fewer fields than the header, or
    with an empty field, is rejected: polars reports both as nulls and there
    is no way to tell a blank value from a missing one.

    Args:
        path (str | Path): File to read.
        label_position (int): 0-based index of the label column.
        separator (str): Single-character field delimiter. Defaults to ",".

    Returns:
        Dataset: The parsed dataset.

    Raises:
        DatasetReadError: If the file cannot be opened or parsed, including
            records with more fields than the header.
        LabelColumnError: If `label_position` does not index a header column.
        DuplicateColumnsError: If the header repeats a column name.
        MalformedRecordError: If a record is short or has an empty field.
    """
    try:
        df = pl.read_csv(
            path,
            separator=separator,
            has_header=False,
            infer_schema=False,
        )
    except (OSError, pl.exceptions.PolarsError) as exc:
        raise DatasetReadError(f"Could not read delimited file '{path}': {exc}", path) from exc

    dataset = Dataset.from_records(df.iter_rows(), label_position)
    logger.info(
        "Dataset loaded",
        path=str(path),
        rows=len(dataset.rows),
        attributes=len(dataset.attribute_names),
        label=dataset.label_name,
    )
    return dataset
