"""
pytest configuration and shared fixtures.
"""

import pytest

from parsers.csv_parser import CSVParser
from parsers.file_parser import FileParserFactory


@pytest.fixture
def parse_csv():
    """Parse CSV text into a Dataset."""
    parser = CSVParser()

    def _parse(text, file_name="data.csv"):
        return parser.parse(text, file_name)

    return _parse


@pytest.fixture
def factory():
    return FileParserFactory()


@pytest.fixture
def sales_csv():
    """The sample dataset offered to first-time users."""
    return (
        "Date,Sales,Profit,Cost,Region\n"
        "1,100,20,80,North\n"
        "2,150,40,110,South\n"
        "3,200,80,120,East\n"
        "4,120,30,90,West\n"
        "5,300,100,200,North"
    )


@pytest.fixture
def app(tmp_path):
    """Flask app backed by an in-memory database and a temporary upload folder."""
    from app import create_app

    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_ENGINE_OPTIONS': {},
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'EXPORT_FOLDER': str(tmp_path / 'exports'),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
