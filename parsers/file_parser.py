import logging
import os
from abc import ABC, abstractmethod

from .cells import classify_grid_value, cell_text, MISSING
from .dataset import Dataset, unique_headers


class ParseError(Exception):
    """Base class for failures while turning a file into a Dataset"""


class EmptyFileError(ParseError):
    """The file holds no content to parse"""


class NoHeadersError(ParseError):
    """The header row yielded no fields"""


class FileReadError(ParseError):
    """The file or its byte stream could not be read"""


TEXT_ENCODINGS = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']


def decode_content(content):
    """Decode raw bytes with the first encoding that accepts them"""
    if isinstance(content, str):
        return content

    for encoding in TEXT_ENCODINGS:
        try:
            text = content.decode(encoding)
            logging.debug(f"Decoded content with encoding={encoding}")
            return text
        except (UnicodeDecodeError, LookupError):
            continue

    raise FileReadError("Could not decode file with any supported encoding")


def file_extension(file_name):
    """Lower-cased extension without the dot, '' when there is none"""
    _, ext = os.path.splitext(file_name or '')
    return ext[1:].lower()


class BaseParser(ABC):
    """Abstract base class for file parsers"""

    @abstractmethod
    def parse(self, content, file_name):
        """Parse raw content (bytes or str) and return a Dataset"""
        pass

    def _build_from_grid(self, grid, file_name):
        """Turn a header row plus data rows of raw values into a Dataset.

        Rows whose length differs from the header row are dropped and counted.
        """
        grid = [list(row) for row in grid if not self._is_blank(row)]
        if not grid:
            raise EmptyFileError(f"No data found in {file_name}")

        header_row = self._trim_row(grid[0], 0)
        if len(header_row) == 0:
            raise NoHeadersError(f"Header row of {file_name} is empty")
        headers = unique_headers([cell_text(classify_grid_value(value)) for value in header_row])

        rows = []
        dropped = 0
        for line_number, raw_row in enumerate(grid[1:], start=2):
            raw_row = self._trim_row(raw_row, len(headers))
            if len(raw_row) != len(headers):
                dropped += 1
                logging.debug(
                    f"Dropping row {line_number} of {file_name}: "
                    f"{len(raw_row)} fields, expected {len(headers)}"
                )
                continue
            rows.append([classify_grid_value(value) for value in raw_row])

        if dropped:
            logging.info(f"Dropped {dropped} row(s) with mismatched column count from {file_name}")

        return Dataset.from_rows(file_name, headers, rows, dropped_rows=dropped)

    @staticmethod
    def _trim_row(row, width):
        """Strip trailing empty cells that grid readers pad rows with, down to width"""
        row = list(row)
        while len(row) > width and classify_grid_value(row[-1]) is MISSING:
            row.pop()
        return row

    @staticmethod
    def _is_blank(row):
        return all(classify_grid_value(value) is MISSING for value in row)


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser
        from .html_parser import HTMLTableParser
        from .placeholder_parser import PlaceholderParser

        self.default_parser = CSVParser()
        self.parsers = {
            'csv': self.default_parser,
            'xls': ExcelParser(),
            'xlsx': ExcelParser(),
            'html': HTMLTableParser(),
            'htm': HTMLTableParser(),
            'pdf': PlaceholderParser(),
            'docx': PlaceholderParser(),
            'pptx': PlaceholderParser(),
        }

    def get_parser(self, file_type):
        """Get parser for specific file type; unknown types are read as delimited text"""
        parser = self.parsers.get((file_type or '').lower())
        if not parser:
            logging.info(f"No dedicated parser for '{file_type}', reading as delimited text")
            return self.default_parser
        return parser

    def parse_content(self, content, file_name):
        """Parse in-memory content, choosing the parser by file name extension"""
        parser = self.get_parser(file_extension(file_name))
        logging.info(f"Parsing {file_name} with {type(parser).__name__}")
        return parser.parse(content, file_name)

    def parse_file(self, file_path, file_name=None):
        """Read a file once from disk and parse it"""
        try:
            with open(file_path, 'rb') as f:
                content = f.read()
        except OSError as e:
            logging.error(f"Error reading file {file_path}: {str(e)}")
            raise FileReadError(f"Failed to read file: {str(e)}") from e

        return self.parse_content(content, file_name or os.path.basename(file_path))
