import json
import logging
import sys

from analyzers.bivariate_analyzer import BivariateAnalyzer
from analyzers.descriptive_analyzer import DescriptiveAnalyzer
from parsers.file_parser import FileParserFactory
from utils.export_utils import ExportUtils


class AnalysisExporter:
    def __init__(self):
        self.descriptive_analyzer = DescriptiveAnalyzer()
        self.bivariate_analyzer = BivariateAnalyzer()
        self.export_utils = ExportUtils()

    def run_full_analysis(self, dataset):
        """
        Run the analysis pipeline over one dataset and return results as a dictionary
        """
        column_stats = self.descriptive_analyzer.analyze(dataset)

        results = {
            "dataset": {
                "fileName": dataset.file_name,
                "rowCount": len(dataset.rows),
                "columnCount": len(dataset.headers),
                "headers": list(dataset.headers),
                "numericColumns": list(dataset.numeric_columns),
                "droppedRows": dataset.dropped_rows,
                "isPlaceholder": dataset.is_placeholder,
            },
            "columnStats": [stats.to_dict() for stats in column_stats],
            "correlations": self.bivariate_analyzer.correlation_matrix(dataset),
        }

        logging.info(
            f"Analysed {dataset.file_name}: {len(column_stats)} numeric column(s), "
            f"{len(results['correlations'])} correlation(s)"
        )
        return results

    def export_to_json(self, dataset, output_file="analysis_results.json"):
        """
        Run analysis and save results to a JSON file
        """
        results = self.export_utils._make_json_serializable(self.run_full_analysis(dataset))

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(results, f, indent=4, ensure_ascii=False)

        return output_file


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        print("usage: python analysis_exporter.py <data file> [output.json]")
        sys.exit(1)

    dataset = FileParserFactory().parse_file(sys.argv[1])
    output = sys.argv[2] if len(sys.argv) > 2 else "analysis_output.json"

    exporter = AnalysisExporter()
    output = exporter.export_to_json(dataset, output)
    print(f"Analysis results saved to {output}")
