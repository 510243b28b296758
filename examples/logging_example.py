"""Demonstrates how to enable and configure logging in id3tree.

id3tree logging is disabled by default. Users opt in by calling ``enable_logging()``,
which returns a ``LoggingHandle``. The handle can be used as a context manager
(``with enable_logging(): ...``) or disabled manually via ``handle.disable()``.
When the last active handle is disabled, id3tree logging is automatically turned off.

Key concepts shown here:

- ``level``: controls the minimum log level. The custom ``SPLIT`` level
  (numeric value 15, between DEBUG and INFO) reports every attribute the
  engine splits on, together with its information gain.
- Automatic cleanup: logging is re-disabled when the context manager exits.
"""

import polars as pl

from id3tree import Dataset, enable_logging, induce, render_tree
from id3tree.induction import InductionConfig

df_tennis = pl.DataFrame({
    "outlook": ["sunny", "sunny", "overcast", "rain", "rain", "rain", "overcast"],
    "wind": ["weak", "strong", "weak", "weak", "weak", "strong", "strong"],
    "humidity": ["high", "high", "high", "high", "normal", "normal", "normal"],
    "play": ["no", "no", "yes", "yes", "yes", "no", "yes"],
})

with enable_logging(level="SPLIT"):
    dataset = Dataset.from_frame(df_tennis, label_position=3)
    tree = induce(dataset)
    print(render_tree(tree))

    # Same data, but refuse splits that gain nothing
    print(render_tree(induce(dataset, InductionConfig(require_positive_gain=True))))

# Logging automatically disabled here
