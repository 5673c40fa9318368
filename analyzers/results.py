from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ColumnStats:
    column: str
    count: int
    min: float
    max: float
    mean: float
    median: float
    std_dev: float

    def to_dict(self):
        return {
            'column': self.column,
            'count': self.count,
            'min': self.min,
            'max': self.max,
            'mean': self.mean,
            'median': self.median,
            'stdDev': self.std_dev,
        }


@dataclass(frozen=True)
class TTestResult:
    """Welch two-sample t-test between two columns"""
    t_stat: float
    mean1: float
    mean2: float
    n1: int
    n2: int
    df: float
    p_value: float

    def to_dict(self):
        return {
            'tStat': self.t_stat,
            'mean1': self.mean1,
            'mean2': self.mean2,
            'n1': self.n1,
            'n2': self.n2,
            'df': self.df,
            'pValue': self.p_value,
        }


@dataclass(frozen=True)
class Prediction:
    x: float
    y: float
    predicted_y: float

    def to_dict(self, kind='actual'):
        return {'x': self.x, 'y': self.y, 'predictedY': self.predicted_y, 'type': kind}


@dataclass(frozen=True)
class ForecastPoint:
    x: float
    y: float

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class RegressionResult:
    """Simple linear regression fit with observed and extrapolated points.

    ``predictions`` hold one entry per observation sorted by x;
    ``future_values`` continue the x spacing beyond the observed range.
    """
    slope: float
    intercept: float
    r2: float
    equation: str
    predictions: List[Prediction] = field(default_factory=list)
    future_values: List[ForecastPoint] = field(default_factory=list)

    def series(self):
        """Observed points followed by forecast points, as a chart consumes them"""
        points = [p.to_dict('actual') for p in self.predictions]
        points.extend(
            {'x': f.x, 'y': f.y, 'predictedY': f.y, 'type': 'future'}
            for f in self.future_values
        )
        return points

    def to_dict(self):
        return {
            'slope': self.slope,
            'intercept': self.intercept,
            'r2': self.r2,
            'equation': self.equation,
            'predictions': [p.to_dict() for p in self.predictions],
            'futureValues': [f.to_dict() for f in self.future_values],
            'series': self.series(),
        }
