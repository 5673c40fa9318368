import logging

from analyzers.bivariate_analyzer import BivariateAnalyzer

SAMPLE_SIZE = 5
TOP_CORRELATIONS = 3


class DataInsights:
    """Bridge between computed statistics and an external narrative-summary service.

    Text generation itself happens outside this package: callers inject a
    generator taking ``(dataset, column_stats)`` and returning a string.
    """

    @staticmethod
    def build_summary_context(dataset, column_stats, sample_size=SAMPLE_SIZE):
        """The facts a summary service is given about a dataset"""
        return {
            'fileName': dataset.file_name,
            'headers': list(dataset.headers),
            'isPlaceholder': dataset.is_placeholder,
            'stats': [
                {
                    'col': stats.column,
                    'mean': round(stats.mean, 2),
                    'max': stats.max,
                    'min': stats.min,
                }
                for stats in column_stats
            ],
            'correlations': BivariateAnalyzer().strongest_correlations(dataset, limit=TOP_CORRELATIONS),
            'sample': [
                {header: row[header].to_json() for header in dataset.headers}
                for row in dataset.rows[:sample_size]
            ],
        }

    @staticmethod
    def generate_summary(dataset, column_stats, generator=None):
        """Ask the configured generator for a summary; None when there is no generator"""
        if generator is None:
            return None

        try:
            summary = generator(dataset, column_stats)
        except Exception as e:
            logging.error(f"Summary generation failed for {dataset.file_name}: {str(e)}")
            raise

        if not summary:
            logging.warning(f"Summary generator returned no text for {dataset.file_name}")
            return None
        return str(summary)
