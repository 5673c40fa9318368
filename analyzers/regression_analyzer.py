import logging

import numpy as np

from .bivariate_analyzer import pearson_from_pairs
from .results import RegressionResult, Prediction, ForecastPoint

DEFAULT_FORECAST_STEPS = 5


def linear_regression(dataset, x_column, y_column, forecast_steps=DEFAULT_FORECAST_STEPS):
    """Ordinary least squares fit of y on a single predictor x.

    Only rows where both cells are numbers take part. Returns None with
    fewer than two such rows. When every x is equal the slope is 0 and the
    intercept is the mean of y.
    """
    pairs = dataset.paired_numbers(x_column, y_column)
    n = len(pairs)
    if n < 2:
        return None

    x = np.array([p[0] for p in pairs], dtype=float)
    y = np.array([p[1] for p in pairs], dtype=float)

    sum_x, sum_y = float(x.sum()), float(y.sum())
    sum_xy = float(np.dot(x, y))
    sum_xx = float(np.dot(x, x))

    if x.min() == x.max():
        logging.debug(f"All x values of '{x_column}' are equal, slope set to 0")
        slope = 0.0
    else:
        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    r = pearson_from_pairs(x, y)
    r2 = r * r

    # Stable sort keeps the original row order among equal x values
    order = np.argsort(x, kind='stable')
    predictions = [
        Prediction(x=float(x[i]), y=float(y[i]), predicted_y=slope * float(x[i]) + intercept)
        for i in order
    ]

    future_values = forecast(predictions, slope, intercept, forecast_steps)

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r2=r2,
        equation=format_equation(slope, intercept),
        predictions=predictions,
        future_values=future_values,
    )


def forecast(predictions, slope, intercept, steps):
    """Extend x past the last observation by the average observed spacing"""
    steps = max(0, int(steps))
    first_x, last_x = predictions[0].x, predictions[-1].x
    n = len(predictions)

    step = (last_x - first_x) / (n - 1) if n > 1 else 0.0
    if not np.isfinite(step) or step == 0:
        step = 1.0

    points = []
    for i in range(1, steps + 1):
        future_x = last_x + step * i
        points.append(ForecastPoint(x=future_x, y=slope * future_x + intercept))
    return points


def format_equation(slope, intercept):
    return f"y = {slope:.4f}x + {intercept:.4f}"
