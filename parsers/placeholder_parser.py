import logging
import zlib
from datetime import date, timedelta

import numpy as np

from .cells import Number, Text
from .dataset import Dataset
from .file_parser import BaseParser

PLACEHOLDER_ROWS = 50

FINANCIAL_HEADERS = ['Date', 'Department', 'Revenue', 'Expenses', 'Profit', 'Region']
PRODUCT_HEADERS = ['ID', 'Product', 'Category', 'Sales', 'Rating', 'Stock']

DEPARTMENTS = ['HR', 'IT', 'Sales', 'Marketing']
REGIONS = ['North', 'South', 'East', 'West']
CATEGORIES = ['Electronics', 'Home', 'Office']


class PlaceholderParser(BaseParser):
    """Stand-in for document formats (.pdf, .docx, .pptx) that are not parsed.

    Nothing is extracted from the file. The returned dataset is synthetic,
    flagged with ``is_placeholder=True``, and generated from a seed derived
    from the file name so the same name always yields the same rows.
    """

    def parse(self, content, file_name):
        logging.warning(
            f"{file_name} is a document format that cannot be parsed; "
            f"returning a synthetic placeholder dataset"
        )
        rng = np.random.default_rng(zlib.crc32(file_name.encode('utf-8')))

        lowered = file_name.lower()
        if 'finance' in lowered or 'budget' in lowered:
            headers, rows = FINANCIAL_HEADERS, self._financial_rows(rng)
        else:
            headers, rows = PRODUCT_HEADERS, self._product_rows(rng)

        return Dataset.from_rows(file_name, headers, rows, is_placeholder=True)

    @staticmethod
    def _financial_rows(rng):
        start = date(2024, 1, 1)
        rows = []
        for i in range(PLACEHOLDER_ROWS):
            revenue = int(rng.integers(1000, 11000))
            expenses = int(rng.integers(500, 8500))
            rows.append([
                Text((start + timedelta(days=i)).isoformat()),
                Text(DEPARTMENTS[rng.integers(len(DEPARTMENTS))]),
                Number(float(revenue)),
                Number(float(expenses)),
                Number(float(revenue - expenses)),
                Text(REGIONS[rng.integers(len(REGIONS))]),
            ])
        return rows

    @staticmethod
    def _product_rows(rng):
        rows = []
        for i in range(PLACEHOLDER_ROWS):
            rows.append([
                Number(float(1000 + i)),
                Text(f'Item {i}'),
                Text(CATEGORIES[rng.integers(len(CATEGORIES))]),
                Number(float(rng.integers(0, 500))),
                Number(round(float(rng.uniform(0, 5)), 1)),
                Number(float(rng.integers(0, 100))),
            ])
        return rows
