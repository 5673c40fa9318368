import logging
from html.parser import HTMLParser

from .dataset import Dataset, unique_headers
from .cells import classify_cell
from .file_parser import BaseParser, EmptyFileError, NoHeadersError, decode_content


class _FirstTableCollector(HTMLParser):
    """Collect the cells of the first <table> in a document.

    Each collected row is a list of (tag, text) pairs where tag is 'th' or
    'td'. Nested tables are read as part of the enclosing cell's text.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.rows = []
        self.found_table = False
        self._depth = 0
        self._done = False
        self._row = None
        self._cell_tag = None
        self._cell_text = []

    def handle_starttag(self, tag, attrs):
        if self._done:
            return
        if tag == 'table':
            self._depth += 1
            self.found_table = True
            return
        if self._depth != 1:
            return
        if tag == 'tr':
            self._close_row()
            self._row = []
        elif tag in ('td', 'th'):
            self._close_cell()
            if self._row is None:
                self._row = []
            self._cell_tag = tag
            self._cell_text = []

    def handle_endtag(self, tag):
        if self._done:
            return
        if tag == 'table':
            if self._depth == 1:
                self._close_row()
                self._done = True
            self._depth = max(0, self._depth - 1)
        elif self._depth == 1:
            if tag in ('td', 'th'):
                self._close_cell()
            elif tag == 'tr':
                self._close_row()

    def handle_data(self, data):
        if self._cell_tag is not None and not self._done:
            self._cell_text.append(data)

    def _close_cell(self):
        if self._cell_tag is not None and self._row is not None:
            self._row.append((self._cell_tag, ''.join(self._cell_text).strip()))
        self._cell_tag = None
        self._cell_text = []

    def _close_row(self):
        self._close_cell()
        if self._row is not None:
            self.rows.append(self._row)
        self._row = None


class HTMLTableParser(BaseParser):
    """Parser for the first table of an HTML document"""

    def parse(self, content, file_name):
        """Parse an HTML table and return a Dataset"""
        if content is None or len(content) == 0:
            raise EmptyFileError(f"{file_name} is empty")

        collector = _FirstTableCollector()
        collector.feed(decode_content(content))
        collector.close()

        if not collector.found_table:
            raise NoHeadersError(f"No table found in {file_name}")
        if not collector.rows:
            raise EmptyFileError(f"Table in {file_name} has no rows")

        # <th> cells from every row name the columns, so tables that use <th>
        # as row labels end up with all data rows dropped as mismatched
        headers = [text for row in collector.rows for tag, text in row if tag == 'th']
        if not headers:
            # No <th> cells: the first row's <td> cells name the columns
            headers = [text or f'Col {i}' for i, (tag, text) in enumerate(collector.rows[0])]
        if not headers:
            raise NoHeadersError(f"Table in {file_name} has no header cells")
        headers = unique_headers(headers)

        rows = []
        dropped = 0
        # The first row holds the headers
        for row in collector.rows[1:]:
            cells = [text for tag, text in row if tag == 'td']
            if len(cells) != len(headers):
                dropped += 1
                continue
            rows.append([classify_cell(text) for text in cells])

        if dropped:
            logging.info(f"Dropped {dropped} table row(s) with mismatched column count from {file_name}")

        return Dataset.from_rows(file_name, headers, rows, dropped_rows=dropped)
