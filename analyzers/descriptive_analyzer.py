import logging
import math

import numpy as np

from .results import ColumnStats


def compute_column_stats(dataset, column):
    """Summary statistics over the numeric cells of one column.

    Text and missing cells are ignored. Returns None when the column has no
    numeric cells or does not exist. The standard deviation is the population
    one (divisor ``count``).
    """
    values = np.sort(np.asarray(dataset.numbers(column), dtype=float))
    count = len(values)
    if count == 0:
        return None

    mean = float(values.sum() / count)
    mid = count // 2
    if count % 2:
        median = float(values[mid])
    else:
        median = float((values[mid - 1] + values[mid]) / 2)
    std_dev = math.sqrt(float(np.sum((values - mean) ** 2)) / count)

    return ColumnStats(
        column=column,
        count=count,
        min=float(values[0]),
        max=float(values[-1]),
        mean=mean,
        median=median,
        std_dev=std_dev,
    )


class DescriptiveAnalyzer:
    """Per-column summaries for every numeric column of a dataset"""

    def analyze(self, dataset):
        """Stats for each numeric column with data, in header order"""
        results = []
        for column in dataset.numeric_columns:
            stats = compute_column_stats(dataset, column)
            if stats is None:
                logging.debug(f"Column '{column}' has no numeric values, skipping stats")
                continue
            results.append(stats)
        return results
