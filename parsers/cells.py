import math
import re
from dataclasses import dataclass

# Optional sign, digits with optional fraction (or a bare fraction), optional exponent
NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')


@dataclass(frozen=True)
class Number:
    """A finite numeric cell"""
    value: float

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class Text:
    """A non-empty cell that is not a number"""
    value: str

    def to_json(self):
        return self.value


class Missing:
    """An empty or absent cell"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'MISSING'

    def __bool__(self):
        return False

    def to_json(self):
        return None


MISSING = Missing()


def parse_number(text):
    """Return the float for a fully numeric string, otherwise None.

    The whole trimmed string must match the decimal grammar, so '12abc',
    'nan', 'inf' and '1,000' are rejected. Values that overflow to infinity
    are rejected as well.
    """
    if not isinstance(text, str):
        return None
    candidate = text.strip()
    if not NUMBER_PATTERN.match(candidate):
        return None
    value = float(candidate)
    if not math.isfinite(value):
        return None
    return value


def strip_quotes(text):
    """Trim whitespace and remove one layer of surrounding double quotes"""
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    if text == '"':
        return ''
    return text


def classify_cell(raw):
    """Turn a raw textual field into Number, Text or MISSING"""
    if raw is None:
        return MISSING
    text = strip_quotes(str(raw))
    if text == '':
        return MISSING
    value = parse_number(text)
    if value is not None:
        return Number(value)
    return Text(text)


def classify_grid_value(value):
    """Classify a value coming from a pre-tokenized grid (spreadsheet, HTML)"""
    if value is None:
        return MISSING
    if isinstance(value, bool):
        return Text(str(value).upper())
    if isinstance(value, (int, float)):
        value = float(value)
        if math.isnan(value):
            return MISSING
        if not math.isfinite(value):
            return Text(str(value))
        return Number(value)
    if hasattr(value, 'isoformat'):
        return Text(value.isoformat())
    if hasattr(value, 'item') and not isinstance(value, str):
        # numpy scalars from pandas
        return classify_grid_value(value.item())
    return classify_cell(str(value))


def cell_text(cell):
    """Render a cell as the text a user would see"""
    if isinstance(cell, Number):
        return format_number(cell.value)
    if isinstance(cell, Text):
        return cell.value
    return ''


def format_number(value):
    """Shortest text that parses back to the same float; integral values drop '.0'"""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def sort_key(cell):
    """Total ordering: numbers ascending, then text, then missing cells"""
    if isinstance(cell, Number):
        return (0, cell.value, '')
    if isinstance(cell, Text):
        return (1, 0.0, cell.value)
    return (2, 0.0, '')
