"""Custom exceptions for id3tree.

Configuration and input exceptions (subclass ValueError):
- LabelColumnError: Raised when the label column position is outside the header.
- DuplicateColumnsError: Raised when the header repeats a column name.
- MalformedRecordError: Raised when a data record does not line up with the header.

I/O exceptions (subclass Exception):
- DatasetReadError: Raised when a delimited file cannot be opened or parsed.

Contract exceptions (subclass RuntimeError):
- InvariantViolationError: Raised when the induction engine is handed input a
  well-formed Dataset can never produce, such as an empty row subset.
"""

from __future__ import annotations

from pathlib import Path


class LabelColumnError(ValueError):
    """Raised when the label column position does not index a header column.

    Attributes:
        label_position (int): The 0-based label column position requested.
        column_count (int): Number of columns in the header row.

    Examples:
        >>> err = LabelColumnError(label_position=4, column_count=3)
        >>> str(err)
        'Label column position 4 is out of range for a header with 3 columns'
    """

    label_position: int
    column_count: int

    def __init__(self, label_position: int, column_count: int) -> None:
        """Initialize LabelColumnError.

        Args:
            label_position (int): The requested 0-based label column position.
            column_count (int): Number of columns in the header row.
        """
        super().__init__(
            f"Label column position {label_position} is out of range for a header with {column_count} columns"
        )
        self.label_position = label_position
        self.column_count = column_count


class DuplicateColumnsError(ValueError):
    """Raised when duplicate column names appear in a header row.

    Attributes:
        columns (list[str]): The header that contains duplicates.
        duplicate_columns (list[str]): The specific column names that are
            duplicated (each listed once).

    Examples:
        >>> err = DuplicateColumnsError(columns=["a", "a", "b"])
        >>> err.duplicate_columns
        ['a']
    """

    columns: list[str]
    duplicate_columns: list[str]

    def __init__(self, columns: list[str]) -> None:
        """Initialize DuplicateColumnsError.

        Args:
            columns (list[str]): The header containing duplicates.
        """
        seen: set[str] = set()
        duplicates: list[str] = []
        for col in columns:
            if col in seen and col not in duplicates:
                duplicates.append(col)
            seen.add(col)
        super().__init__(f"Duplicate column names are not allowed: {duplicates}")
        self.columns = columns
        self.duplicate_columns = duplicates


class MalformedRecordError(ValueError):
    """Raised when a data record does not match the header row.

    Attributes:
        record_index (int): 0-based index of the offending record, counting the
            header as record 0.
        expected_fields (int): Number of fields in the header.
        actual_fields (int): Number of usable fields found in the record.
    """

    record_index: int
    expected_fields: int
    actual_fields: int

    def __init__(self, record_index: int, expected_fields: int, actual_fields: int) -> None:
        """Initialize MalformedRecordError.

        Args:
            record_index (int): 0-based index of the offending record.
            expected_fields (int): Number of fields in the header.
            actual_fields (int): Number of usable fields found in the record.
        """
        super().__init__(f"Record {record_index} has {actual_fields} fields, expected {expected_fields}")
        self.record_index = record_index
        self.expected_fields = expected_fields
        self.actual_fields = actual_fields


class DatasetReadError(Exception):
    """Raised when a delimited text file cannot be read into a Dataset.

    The underlying OS or parser error is always chained as ``__cause__``.

    Attributes:
        path (Path): The file that failed to load.
    """

    path: Path

    def __init__(self, message: str, path: str | Path) -> None:
        """Initialize DatasetReadError.

        Args:
            message (str): Description of the failure.
            path (str | Path): The file that failed to load.
        """
        super().__init__(message)
        self.path = Path(path)

    def __repr__(self) -> str:
        """Return detailed representation for debugging.

        Returns:
            str: Representation including message and path.
        """
        return f"{self.__class__.__name__}(message={str(self)!r}, path={str(self.path)!r})"


class InvariantViolationError(RuntimeError):
    """Raised when the induction engine receives input a valid Dataset cannot produce."""
