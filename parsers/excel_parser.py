import io
import logging

import pandas as pd

from .file_parser import BaseParser, EmptyFileError, FileReadError


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx)"""

    def parse(self, content, file_name):
        """Read the first sheet of a workbook as a raw grid and return a Dataset"""
        if content is None or len(content) == 0:
            raise EmptyFileError(f"{file_name} is empty")
        if isinstance(content, str):
            raise FileReadError(f"{file_name} must be read as bytes to parse a workbook")

        try:
            excel_file = pd.ExcelFile(io.BytesIO(content))
            if not excel_file.sheet_names:
                raise EmptyFileError(f"{file_name} has no sheets")

            first_sheet = excel_file.sheet_names[0]
            # Keep cells untouched; header detection and typing happen in _build_from_grid
            df = excel_file.parse(sheet_name=first_sheet, header=None, dtype=object)

        except EmptyFileError:
            raise
        except Exception as e:
            logging.error(f"Error parsing Excel file {file_name}: {str(e)}")
            raise FileReadError(f"Failed to parse Excel file: {str(e)}") from e

        if len(excel_file.sheet_names) > 1:
            logging.info(f"Using first sheet '{first_sheet}' of {len(excel_file.sheet_names)} in {file_name}")

        grid = [self._row_values(row) for row in df.itertuples(index=False, name=None)]
        return self._build_from_grid(grid, file_name)

    @staticmethod
    def _row_values(row):
        """Replace pandas NA markers with None so they classify as missing"""
        return [None if pd.isna(value) else value for value in row]
