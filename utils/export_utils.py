import csv
import io
import json
import os
from datetime import datetime

import numpy as np
import pandas as pd

from parsers.cells import cell_text


class ExportUtils:
    """Utility class for exporting datasets and analysis results in various formats"""

    FORMATS = ('json', 'csv', 'txt')

    def __init__(self, export_dir="exports"):
        self.export_dir = export_dir

    def dataset_to_csv(self, dataset):
        """Render a dataset as comma-delimited text.

        Fields holding a comma, quote or line break are quoted with embedded
        quotes doubled. Numbers use their shortest round-trip form.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
        writer.writerow(dataset.headers)
        for row in dataset.rows:
            writer.writerow([cell_text(row[header]) for header in dataset.headers])
        return buffer.getvalue().rstrip('\n')

    def export_filename(self, dataset):
        """'sales.xlsx' -> 'sales_export.csv'"""
        stem, _ = os.path.splitext(dataset.file_name)
        return f"{stem or 'dataset'}_export.csv"

    def export_dataset(self, dataset):
        """Write a dataset to the export directory as CSV"""
        os.makedirs(self.export_dir, exist_ok=True)
        filepath = os.path.join(self.export_dir, self.export_filename(dataset))

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            f.write(self.dataset_to_csv(dataset))

        return filepath

    def export(self, results, format_type, session_name):
        """Export analysis results in specified format"""
        os.makedirs(self.export_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{session_name}_{timestamp}"

        if format_type.lower() == 'json':
            return self._export_json(results, filename)
        elif format_type.lower() == 'csv':
            return self._export_csv(results, filename)
        elif format_type.lower() == 'txt':
            return self._export_text(results, filename)
        else:
            raise ValueError(f"Unsupported export format: {format_type}")

    def _export_json(self, results, filename):
        """Export results as JSON"""
        filepath = os.path.join(self.export_dir, f"{filename}.json")

        serializable_results = self._make_json_serializable(results)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(serializable_results, f, indent=2, ensure_ascii=False)

        return filepath

    def _export_csv(self, results, filename):
        """Export column statistics as CSV, one row per column"""
        filepath = os.path.join(self.export_dir, f"{filename}.csv")

        flattened_data = self._flatten_results_for_csv(results)

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            if flattened_data:
                writer = csv.DictWriter(f, fieldnames=flattened_data[0].keys())
                writer.writeheader()
                writer.writerows(flattened_data)

        return filepath

    def _export_text(self, results, filename):
        """Export results as plain text report"""
        filepath = os.path.join(self.export_dir, f"{filename}.txt")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self._generate_text_report(results, filename))

        return filepath

    def _make_json_serializable(self, obj):
        """Convert numpy types and other non-serializable objects to JSON-compatible types"""
        if isinstance(obj, dict):
            return {key: self._make_json_serializable(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_json_serializable(item) for item in obj]
        elif hasattr(obj, 'to_dict'):
            return self._make_json_serializable(obj.to_dict())
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return None if np.isnan(obj) else float(obj)
        elif isinstance(obj, float) and np.isnan(obj):
            return None
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif obj is not None and not isinstance(obj, (str, int, float, bool)) and pd.isna(obj):
            return None
        elif hasattr(obj, 'isoformat'):  # datetime objects
            return obj.isoformat()
        else:
            return obj

    def _flatten_results_for_csv(self, results):
        """One row per column statistic, tagged with the dataset's file name"""
        file_name = results.get('dataset', {}).get('fileName', '')
        flattened = []
        for stats in results.get('columnStats', []):
            row = {'file_name': file_name}
            row.update(stats)
            flattened.append(row)
        return flattened

    def _generate_text_report(self, results, filename):
        """Generate plain text report"""
        dataset = results.get('dataset', {})
        report = f"""
DATA ANALYSIS REPORT
{'=' * 50}

Session: {filename}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

SUMMARY
{'-' * 20}
File: {dataset.get('fileName', '')}
Rows: {dataset.get('rowCount', 0)}
Columns: {dataset.get('columnCount', 0)}
Numeric Columns: {', '.join(dataset.get('numericColumns', []))}
Dropped Rows: {dataset.get('droppedRows', 0)}
"""
        if dataset.get('isPlaceholder'):
            report += "NOTE: synthetic placeholder data, nothing was extracted from the file\n"

        if results.get('columnStats'):
            report += f"\nCOLUMN STATISTICS\n{'-' * 30}\n"
            report += f"{'Column':<20} {'Count':<8} {'Min':<12} {'Max':<12} {'Mean':<12} {'Median':<12} {'Std Dev':<12}\n"
            report += f"{'-' * 92}\n"
            for stats in results['columnStats']:
                report += f"{stats['column']:<20} {stats['count']:<8} "
                report += f"{stats['min']:<12.4g} {stats['max']:<12.4g} {stats['mean']:<12.4g} "
                report += f"{stats['median']:<12.4g} {stats['stdDev']:<12.4g}\n"

        if results.get('correlations'):
            report += f"\nCORRELATIONS\n{'-' * 30}\n"
            for item in results['correlations']:
                report += f"{item['columnA']} ↔ {item['columnB']}: r = {item['r']:.4f}\n"

        return report
