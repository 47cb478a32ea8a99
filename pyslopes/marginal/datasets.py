"""
Dataset loading for per-feature regression.

Reads the Boston housing CSV layout (a label column, twelve features and
the median value) into a DataSource. Every record must have exactly as
many fields as there are columns, or the load fails. Parsing of the
fields themselves is forgiving on purpose: a field that is not a numeric
literal becomes zero instead of failing the load.

Numeric literals are matched verbatim, with no whitespace trimming:
decimal floats with an optional exponent, hexadecimal floats with a
binary exponent ('0x1p-2'), 'inf'/'infinity' with an optional sign and
'nan', all case-insensitive. Integer columns take only optionally signed
digit strings.
"""

from __future__ import annotations

import csv
import math
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pandas as pd
from loguru import logger

from pyslopes.core.datasource import DataSource
from pyslopes.core.exceptions import ValidationError
from pyslopes.marginal.features import (
    BOSTON_COLUMNS,
    BOSTON_INTEGER_COLUMNS,
    BOSTON_LABEL,
    BOSTON_TARGET,
)

_DECIMAL_PATTERN = r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?'
_SPECIAL_PATTERN = r'(?i:[+-]?inf(?:inity)?|nan)'
_HEX_PATTERN = r'[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+'
_INTEGER_PATTERN = r'[+-]?[0-9]+'


def load_csv(
    path: str | Path,
    *,
    columns: Sequence[str] = BOSTON_COLUMNS,
    label: str | None = BOSTON_LABEL,
    target: str = BOSTON_TARGET,
    integer_columns: Sequence[str] = BOSTON_INTEGER_COLUMNS,
    header: bool = True,
) -> DataSource:
    """
    Load a CSV file into a DataSource.

    Bytes that are not valid UTF-8 are kept (as surrogate escapes) rather
    than failing the load; they only matter in the label column.

    Args:
        path: CSV file
        columns: Column names, in file order. Every record, the header
            included, must have exactly this many fields.
        label: Column holding the row label, or None if there is none
        target: Target column
        integer_columns: Columns that only accept integer literals
        header: Whether the first record is a header row (skipped).
            With header=False the header line is parsed like any other
            record and becomes an all-zero row, so n is one larger (507
            for the 506-row Boston file), matching loaders that treat
            every line as data.

    Returns:
        DataSource with one float64 column per non-label column, the
        labels, and 'target'/'features' metadata

    Raises:
        OSError: If the file cannot be opened (FileNotFoundError,
            IsADirectoryError, ...)
        ValidationError: If a record does not have exactly `len(columns)`
            fields, the file is not valid CSV, or the target/label is not
            among the columns
    """
    path = Path(path)
    columns = list(columns)
    for required in (target, label):
        if required is not None and required not in columns:
            raise ValidationError(f"column '{required}' is not in columns {columns}")

    rows = _read_records(path, len(columns))
    if header:
        rows = rows[1:]
    raw = pd.DataFrame(rows, columns=columns, dtype=object)

    parsed = pd.DataFrame(index=raw.index)
    for name in columns:
        if name == label:
            parsed[name] = raw[name]
        elif name in integer_columns:
            parsed[name] = _parse_integers(raw[name])
        else:
            parsed[name] = _parse_floats(raw[name])

    logger.debug("loaded {} records from {}", len(parsed), path)
    return DataSource.from_dataframe(
        parsed, label=label, target=target, source_path=str(path)
    )


def _read_records(path: Path, n_fields: int) -> list[list[str]]:
    """Split the file into records, each exactly `n_fields` long."""
    rows = []
    with open(path, 'r', newline='', encoding='utf-8', errors='surrogateescape') as handle:
        reader = csv.reader(handle)
        try:
            for row in reader:
                if not row:
                    continue  # blank line
                if len(row) != n_fields:
                    raise ValidationError(
                        f"{path}: expected {n_fields} fields per record, "
                        f"got {len(row)} on line {reader.line_num}"
                    )
                rows.append(row)
        except csv.Error as e:
            raise ValidationError(f"{path}: line {reader.line_num}: {e}") from e
    return rows


def _parse_floats(values: pd.Series) -> pd.Series:
    """Parse float literals; anything else becomes 0.0."""
    parsed = pd.Series(0.0, index=values.index, dtype=np.float64)
    if values.empty:
        return parsed
    text = values.astype(str)
    decimal = text.str.fullmatch(_DECIMAL_PATTERN) | text.str.fullmatch(_SPECIAL_PATTERN)
    hexadecimal = text.str.fullmatch(_HEX_PATTERN)
    parsed.loc[decimal] = text[decimal].map(float)
    parsed.loc[hexadecimal] = text[hexadecimal].map(_from_hex)
    return parsed


def _from_hex(literal: str) -> float:
    """Hexadecimal float; out of range saturates to ±Inf."""
    try:
        return float.fromhex(literal)
    except OverflowError:
        return -math.inf if literal.startswith('-') else math.inf


def _parse_integers(values: pd.Series) -> pd.Series:
    """Parse integer literals; anything else (including '1.0' and ' 1') becomes 0."""
    parsed = pd.Series(0.0, index=values.index, dtype=np.float64)
    if values.empty:
        return parsed
    text = values.astype(str)
    is_integer = text.str.fullmatch(_INTEGER_PATTERN)
    parsed.loc[is_integer] = text[is_integer].map(int).astype(np.float64)
    return parsed
