import os
import logging
from flask import request, jsonify, current_app, send_file
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename
from models import db, UploadedFile
from parsers.file_parser import FileParserFactory, ParseError, file_extension
from analyzers.descriptive_analyzer import DescriptiveAnalyzer, compute_column_stats
from analyzers.bivariate_analyzer import pearson, welch_t_test
from analyzers.regression_analyzer import linear_regression
from analysis_exporter import AnalysisExporter
from utils.data_insights import DataInsights
from utils.export_utils import ExportUtils
from utils.report_store import ReportStore


def error_response(message, status):
    return jsonify({
        'status': 'error',
        'message': message
    }), status


def stored_filename(raw_name):
    """Sanitized upload name that keeps the extension even when the stem is not ASCII"""
    stem, _ = os.path.splitext(raw_name)
    file_type = secure_filename(file_extension(raw_name))
    safe_stem = secure_filename(stem) or 'upload'
    return f"{safe_stem}.{file_type}" if file_type else safe_stem


def load_dataset(dataset_id):
    """Re-parse an uploaded file; returns (dataset, error_response)"""
    uploaded_file = db.session.get(UploadedFile, dataset_id)
    if not uploaded_file:
        return None, error_response('Dataset not found', 404)

    try:
        dataset = FileParserFactory().parse_file(uploaded_file.file_path, uploaded_file.filename)
    except ParseError as e:
        logging.error(f"Parse error for {uploaded_file.filename}: {str(e)}")
        return None, error_response(f'Parse failed: {str(e)}', 400)

    return dataset, None


def dataset_view(dataset, args):
    """Apply filter_<header> and sort/direction query parameters"""
    filters = {
        key[len('filter_'):]: value
        for key, value in args.items()
        if key.startswith('filter_')
    }
    dataset = dataset.filter_rows(filters)

    sort_column = args.get('sort')
    if sort_column and sort_column in dataset.headers:
        dataset = dataset.sort_rows(sort_column, descending=args.get('direction', 'asc') == 'desc')
    return dataset


def register_routes(app):
    """Register all routes with the Flask app"""

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        logging.error(f"Request failed: {str(e)}")
        return error_response(f'Request failed: {str(e)}', 500)

    @app.route('/api/upload', methods=['POST'])
    def api_upload_file():
        """Store an uploaded file and parse it"""
        file = request.files.get('file')
        if not file or not file.filename:
            return error_response('No file selected', 400)

        filename = stored_filename(file.filename)
        content = file.read()

        try:
            dataset = FileParserFactory().parse_content(content, filename)
        except ParseError as e:
            logging.error(f"Upload parse error for {filename}: {str(e)}")
            return error_response(f'Invalid file: {str(e)}', 400)

        uploaded_file = UploadedFile(
            filename=filename,
            file_type=file_extension(filename) or 'csv',
            file_path='',
            file_size=len(content)
        )
        db.session.add(uploaded_file)
        db.session.flush()

        file_path = os.path.join(current_app.config['UPLOAD_FOLDER'], f"{uploaded_file.id}_{filename}")
        with open(file_path, 'wb') as f:
            f.write(content)
        uploaded_file.file_path = file_path
        db.session.commit()

        return jsonify({
            'status': 'success',
            'message': f'Parsed {len(dataset.rows)} rows from {filename}',
            'dataset_id': uploaded_file.id,
            'dataset': {
                'fileName': dataset.file_name,
                'headers': list(dataset.headers),
                'numericColumns': list(dataset.numeric_columns),
                'rowCount': len(dataset.rows),
                'droppedRows': dataset.dropped_rows,
                'isPlaceholder': dataset.is_placeholder
            }
        })

    @app.route('/api/datasets/<int:dataset_id>')
    def api_get_dataset(dataset_id):
        """Dataset rows, optionally filtered and sorted"""
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        return jsonify({
            'status': 'success',
            'dataset': dataset_view(dataset, request.args).to_dict()
        })

    @app.route('/api/datasets/<int:dataset_id>/stats')
    def api_column_stats(dataset_id):
        """Statistics for one column (?column=) or every numeric column"""
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        column = request.args.get('column')
        if column:
            stats = compute_column_stats(dataset, column)
            return jsonify({
                'status': 'success',
                'stats': stats.to_dict() if stats else None
            })

        return jsonify({
            'status': 'success',
            'stats': [stats.to_dict() for stats in DescriptiveAnalyzer().analyze(dataset)]
        })

    @app.route('/api/datasets/<int:dataset_id>/correlation')
    def api_correlation(dataset_id):
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        return jsonify({
            'status': 'success',
            'r': pearson(dataset, request.args.get('x', ''), request.args.get('y', ''))
        })

    @app.route('/api/datasets/<int:dataset_id>/ttest')
    def api_ttest(dataset_id):
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        result = welch_t_test(dataset, request.args.get('x', ''), request.args.get('y', ''))
        return jsonify({
            'status': 'success',
            'result': result.to_dict() if result else None
        })

    @app.route('/api/datasets/<int:dataset_id>/regression')
    def api_regression(dataset_id):
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        steps = request.args.get('steps', current_app.config['FORECAST_STEPS'], type=int)
        result = linear_regression(dataset, request.args.get('x', ''), request.args.get('y', ''), steps)
        return jsonify({
            'status': 'success',
            'result': result.to_dict() if result else None
        })

    @app.route('/api/datasets/<int:dataset_id>/analysis')
    def api_analysis(dataset_id):
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        exporter = AnalysisExporter()
        results = exporter.export_utils._make_json_serializable(exporter.run_full_analysis(dataset))
        return jsonify({
            'status': 'success',
            'results': results
        })

    @app.route('/api/datasets/<int:dataset_id>/analysis/export')
    def api_export_analysis(dataset_id):
        """Full analysis written to EXPORT_FOLDER as json, csv or txt"""
        format_type = request.args.get('format', 'json').lower()
        if format_type not in ExportUtils.FORMATS:
            return error_response(f'Unsupported export format: {format_type}', 400)

        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        results = AnalysisExporter().run_full_analysis(dataset)
        session_name, _ = os.path.splitext(dataset.file_name)
        export_utils = ExportUtils(current_app.config['EXPORT_FOLDER'])
        file_path = export_utils.export(results, format_type, session_name or 'dataset')
        logging.info(f"Exported analysis of dataset {dataset_id} to {file_path}")
        return send_file(os.path.abspath(file_path), as_attachment=True)

    @app.route('/api/datasets/<int:dataset_id>/export')
    def api_export_dataset(dataset_id):
        """Filtered/sorted dataset as a CSV download"""
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        export_utils = ExportUtils(current_app.config['EXPORT_FOLDER'])
        file_path = export_utils.export_dataset(dataset_view(dataset, request.args))
        logging.info(f"Exported dataset {dataset_id} to {file_path}")
        return send_file(os.path.abspath(file_path), mimetype='text/csv', as_attachment=True)

    @app.route('/api/datasets/<int:dataset_id>/summary')
    def api_summary(dataset_id):
        """Narrative summary from the configured generator"""
        dataset, error = load_dataset(dataset_id)
        if error:
            return error

        stats = DescriptiveAnalyzer().analyze(dataset)
        try:
            summary = DataInsights.generate_summary(dataset, stats, current_app.config.get('SUMMARY_GENERATOR'))
        except Exception as e:
            return error_response(f'Summary failed: {str(e)}', 502)

        return jsonify({
            'status': 'success',
            'summary': summary,
            'context': DataInsights.build_summary_context(dataset, stats)
        })

    @app.route('/api/reports', methods=['POST'])
    def api_save_report():
        payload = request.get_json(silent=True) or {}
        if not payload.get('fileName'):
            return error_response('fileName is required', 400)

        report_id = ReportStore().save(payload['fileName'], payload.get('summary', ''), payload.get('stats', []))
        return jsonify({
            'status': 'success',
            'id': report_id
        }), 201

    @app.route('/api/reports')
    def api_list_reports():
        return jsonify({
            'status': 'success',
            'reports': [report.to_dict() for report in ReportStore().list()]
        })

    @app.route('/api/reports/<report_id>', methods=['DELETE'])
    def api_delete_report(report_id):
        if not ReportStore().delete(report_id):
            return error_response('Report not found', 404)

        return jsonify({
            'status': 'success',
            'message': 'Report deleted successfully'
        })
