import logging
import math
from itertools import combinations

import numpy as np
from scipy import stats as sp_stats

from .results import TTestResult


def pearson_from_pairs(xs, ys):
    """Pearson's r from the sum-of-products formula.

    A constant column gives 0 rather than NaN.
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    n = len(x)
    if n == 0 or x.min() == x.max() or y.min() == y.max():
        return 0.0

    sum_x, sum_y = x.sum(), y.sum()
    numerator = n * np.dot(x, y) - sum_x * sum_y
    spread_x = n * np.dot(x, x) - sum_x * sum_x
    spread_y = n * np.dot(y, y) - sum_y * sum_y
    # Rounding can push a spread slightly below zero
    denominator = math.sqrt(max(spread_x, 0.0) * max(spread_y, 0.0))

    if denominator == 0:
        return 0.0
    r = float(numerator / denominator)
    return min(1.0, max(-1.0, r))


def pearson(dataset, column_a, column_b):
    """Correlation over rows where both cells are numbers; None with fewer than two pairs"""
    pairs = dataset.paired_numbers(column_a, column_b)
    if len(pairs) < 2:
        return None
    xs, ys = zip(*pairs)
    return pearson_from_pairs(xs, ys)


def welch_t_test(dataset, column_a, column_b):
    """Unpaired two-sample t-test without assuming equal variances.

    Each column is sampled independently, so the samples may differ in
    length. Returns None when either sample has fewer than two numbers.
    A zero standard error gives t = 0 and p = 1.
    """
    x = np.asarray(dataset.numbers(column_a), dtype=float)
    y = np.asarray(dataset.numbers(column_b), dtype=float)
    n1, n2 = len(x), len(y)
    if n1 < 2 or n2 < 2:
        return None

    mean1, mean2 = float(x.mean()), float(y.mean())
    v1 = float(np.var(x, ddof=1)) / n1
    v2 = float(np.var(y, ddof=1)) / n2
    se = math.sqrt(v1 + v2)

    if se == 0:
        return TTestResult(
            t_stat=0.0, mean1=mean1, mean2=mean2, n1=n1, n2=n2,
            df=float(n1 + n2 - 2), p_value=1.0,
        )

    t_stat = (mean1 - mean2) / se
    # Welch-Satterthwaite degrees of freedom (fractional)
    df = (v1 + v2) ** 2 / (v1 ** 2 / (n1 - 1) + v2 ** 2 / (n2 - 1))
    p_value = float(2.0 * sp_stats.t.sf(abs(t_stat), df))

    return TTestResult(
        t_stat=t_stat, mean1=mean1, mean2=mean2, n1=n1, n2=n2,
        df=float(df), p_value=p_value,
    )


class BivariateAnalyzer:
    """Pairwise correlation across the numeric columns of a dataset"""

    def correlation_matrix(self, dataset):
        results = []
        for column_a, column_b in combinations(dataset.numeric_columns, 2):
            r = pearson(dataset, column_a, column_b)
            if r is None:
                continue
            results.append({'columnA': column_a, 'columnB': column_b, 'r': r})

        logging.debug(f"Computed {len(results)} correlations for {dataset.file_name}")
        return results

    def strongest_correlations(self, dataset, limit=5):
        """Column pairs ordered by absolute correlation, strongest first"""
        matrix = self.correlation_matrix(dataset)
        matrix.sort(key=lambda item: abs(item['r']), reverse=True)
        return matrix[:limit]
