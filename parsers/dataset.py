import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .cells import Number, Text, MISSING, cell_text, sort_key


@dataclass(frozen=True)
class Dataset:
    """Normalized, immutable table produced by the parsers.

    ``rows`` holds read-only mappings from header name to cell value, every
    row carrying exactly one cell per header. ``numeric_columns`` lists, in
    header order, the headers whose non-missing cells are all numbers.
    """
    file_name: str
    headers: tuple
    rows: tuple
    numeric_columns: tuple
    dropped_rows: int = 0
    is_placeholder: bool = False
    _numeric_set: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_numeric_set', frozenset(self.numeric_columns))

    @classmethod
    def from_rows(cls, file_name, headers, rows, dropped_rows=0, is_placeholder=False):
        """Build a dataset from header names and cell rows, inferring numeric columns"""
        headers = tuple(headers)
        frozen_rows = []
        for row in rows:
            if isinstance(row, Mapping):
                cells = {header: row.get(header, MISSING) for header in headers}
            else:
                cells = dict(zip(headers, row))
            frozen_rows.append(MappingProxyType(cells))

        return cls(
            file_name=file_name,
            headers=headers,
            rows=tuple(frozen_rows),
            numeric_columns=infer_numeric_columns(headers, frozen_rows),
            dropped_rows=dropped_rows,
            is_placeholder=is_placeholder,
        )

    def is_numeric(self, column):
        return column in self._numeric_set

    def column(self, column):
        """All cells of a column in row order; unknown columns give an empty list"""
        if column not in self.headers:
            return []
        return [row[column] for row in self.rows]

    def numbers(self, column):
        """Numeric cell values of a column, ignoring text and missing cells"""
        return [cell.value for cell in self.column(column) if isinstance(cell, Number)]

    def paired_numbers(self, column_a, column_b):
        """(a, b) pairs from rows where both cells are numbers"""
        if column_a not in self.headers or column_b not in self.headers:
            return []
        pairs = []
        for row in self.rows:
            a, b = row[column_a], row[column_b]
            if isinstance(a, Number) and isinstance(b, Number):
                pairs.append((a.value, b.value))
        return pairs

    def filter_rows(self, filters):
        """New dataset keeping rows whose cell text contains every filter value.

        Matching is a case-insensitive substring test; blank filter values and
        unknown headers are ignored.
        """
        active = {
            header: str(value).strip().lower()
            for header, value in (filters or {}).items()
            if header in self.headers and str(value).strip() != ''
        }
        if not active:
            return self

        kept = [
            row for row in self.rows
            if all(needle in cell_text(row[header]).lower() for header, needle in active.items())
        ]
        return self._with_rows(kept)

    def sort_rows(self, column, descending=False):
        """New dataset with rows stably sorted by one column"""
        if column not in self.headers:
            raise KeyError(f"Unknown column: {column}")

        if descending:
            # Missing cells stay last whichever way the column is sorted
            present = [row for row in self.rows if row[column] is not MISSING]
            absent = [row for row in self.rows if row[column] is MISSING]
            ordered = sorted(present, key=lambda row: sort_key(row[column]), reverse=True) + absent
        else:
            ordered = sorted(self.rows, key=lambda row: sort_key(row[column]))
        return self._with_rows(ordered)

    def _with_rows(self, rows):
        return Dataset(
            file_name=self.file_name,
            headers=self.headers,
            rows=tuple(rows),
            numeric_columns=infer_numeric_columns(self.headers, rows),
            dropped_rows=self.dropped_rows,
            is_placeholder=self.is_placeholder,
        )

    def to_dict(self):
        """Serializable form with stable field names"""
        return {
            'fileName': self.file_name,
            'headers': list(self.headers),
            'rows': [{header: row[header].to_json() for header in self.headers} for row in self.rows],
            'numericColumns': list(self.numeric_columns),
            'droppedRows': self.dropped_rows,
            'isPlaceholder': self.is_placeholder,
        }


def infer_numeric_columns(headers, rows):
    """Headers whose every non-missing cell is a number, in header order"""
    candidates = set(headers)
    for row in rows:
        for header in list(candidates):
            if isinstance(row[header], Text):
                candidates.discard(header)
        if not candidates:
            break
    return tuple(header for header in headers if header in candidates)


def unique_headers(raw_headers):
    """Make header names unique and non-blank, keeping their order"""
    headers = []
    seen = set()
    for i, name in enumerate(raw_headers, start=1):
        name = str(name).strip() if name is not None else ''
        if name == '':
            name = f'Column_{i}'
        if name in seen:
            suffix = 2
            while f'{name}_{suffix}' in seen:
                suffix += 1
            logging.warning(f"Duplicate header '{name}' renamed to '{name}_{suffix}'")
            name = f'{name}_{suffix}'
        seen.add(name)
        headers.append(name)
    return headers
