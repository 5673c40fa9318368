import logging
import re

from .cells import classify_cell, strip_quotes
from .dataset import Dataset, unique_headers
from .file_parser import BaseParser, EmptyFileError, NoHeadersError, decode_content

LINE_SPLIT = re.compile(r'\r?\n')


class CSVParser(BaseParser):
    """Parser for comma-delimited text"""

    def parse(self, content, file_name):
        """Parse delimited text and return a Dataset"""
        if content is None or len(content) == 0:
            raise EmptyFileError(f"{file_name} is empty")

        text = decode_content(content)
        lines = [line for line in LINE_SPLIT.split(text) if line.strip() != '']
        if not lines:
            raise EmptyFileError(f"No data found in {file_name}")

        header_fields = [strip_quotes(field) for field in lines[0].split(',')]
        if not any(header_fields):
            raise NoHeadersError(f"Header row of {file_name} is empty")
        headers = unique_headers(header_fields)

        rows = []
        dropped = 0
        for line_number, line in enumerate(lines[1:], start=2):
            fields = split_fields(line)
            if fields is None or len(fields) != len(headers):
                dropped += 1
                logging.debug(f"Dropping line {line_number} of {file_name}: {line!r}")
                continue
            rows.append([classify_cell(field) for field in fields])

        if dropped:
            logging.info(f"Dropped {dropped} row(s) with mismatched column count from {file_name}")
        logging.info(f"Parsed {len(rows)} rows and {len(headers)} columns from {file_name}")

        return Dataset.from_rows(file_name, headers, rows, dropped_rows=dropped)


def split_fields(line):
    """Split one line into fields, honouring double-quoted runs.

    Commas inside quotes are literal and a doubled quote inside a quoted run
    stands for one quote character. Returns None for malformed lines (an
    unterminated quote or text after a closing quote).
    """
    fields = []
    i = 0
    length = len(line)

    while True:
        while i < length and line[i] in ' \t':
            i += 1

        if i < length and line[i] == '"':
            i += 1
            chunk = []
            while True:
                end = line.find('"', i)
                if end == -1:
                    return None
                chunk.append(line[i:end])
                if end + 1 < length and line[end + 1] == '"':
                    chunk.append('"')
                    i = end + 2
                    continue
                i = end + 1
                break
            while i < length and line[i] in ' \t':
                i += 1
            if i < length and line[i] != ',':
                return None
            # Keep the quotes so classification sees a quoted field
            fields.append('"' + ''.join(chunk) + '"')
        else:
            end = line.find(',', i)
            if end == -1:
                end = length
            fields.append(line[i:end].strip())
            i = end

        if i >= length:
            return fields
        # line[i] is the separating comma
        i += 1
