import json
import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

from utils.export_utils import ExportUtils

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc)


class UploadedFile(db.Model):
    """Model to track uploaded files; datasets are re-parsed from file_path on demand"""
    id = db.Column(db.Integer, primary_key=True)
    filename = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(10), nullable=False)
    file_path = db.Column(db.String(500), nullable=False)
    uploaded_at = db.Column(db.DateTime, default=_utcnow)
    file_size = db.Column(db.Integer)


class SavedReport(db.Model):
    """Model to store a saved report: a summary text plus column statistics"""
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    file_name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    summary = db.Column(db.Text, default='')
    stats_json = db.Column(db.Text)  # JSON list of column statistics

    def set_stats(self, stats):
        """Store column statistics as JSON"""
        self.stats_json = json.dumps(ExportUtils()._make_json_serializable(stats or []))

    def get_stats(self):
        """Retrieve column statistics as a list of dictionaries"""
        if self.stats_json:
            return json.loads(self.stats_json)
        return []

    def to_dict(self):
        return {
            'id': self.id,
            'fileName': self.file_name,
            'date': self.created_at.isoformat() if self.created_at else None,
            'summary': self.summary or '',
            'stats': self.get_stats(),
        }
