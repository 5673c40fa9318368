import logging

from models import db, SavedReport


class ReportStore:
    """Saved reports kept in the application database.

    Must be used inside a Flask application context.
    """

    def save(self, file_name, summary, stats):
        """Persist a report and return its id"""
        report = SavedReport(file_name=file_name, summary=summary or '')
        report.set_stats(stats)
        db.session.add(report)
        db.session.commit()
        logging.info(f"Saved report {report.id} for {file_name}")
        return report.id

    def get(self, report_id):
        return db.session.get(SavedReport, report_id)

    def list(self):
        """All reports, newest first"""
        return SavedReport.query.order_by(SavedReport.created_at.desc()).all()

    def delete(self, report_id):
        """Remove a report; returns False when no report has that id"""
        report = self.get(report_id)
        if report is None:
            return False
        db.session.delete(report)
        db.session.commit()
        logging.info(f"Deleted report {report_id}")
        return True
