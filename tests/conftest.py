import pytest
import sys
import os
import threading

# Add the parent directory to the path so we can import the app
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from client import ApiClient, ApiError, QueryCache
from models import Personel, Musteri


@pytest.fixture
def app(tmp_path):
    # Use a separate test database
    test_db_path = tmp_path / 'test.db'

    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{test_db_path}",
        "BACKUP_DIR": tmp_path / 'backups',
        "BACKUP_KEEP": 2,
    })

    yield app

    # Cleanup
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def seeded(app):
    """Maaşları 3000/6000/9000 olan üç personel ve bir müşteri"""
    with app.app_context():
        people = [
            Personel(Ad='Ali Yılmaz', Pozisyon='Usta', Maas=3000),
            Personel(Ad='Ayşe Demir', Pozisyon='Kalfa', Maas=6000),
            Personel(Ad='Mehmet Kaya', Pozisyon='Şef', Maas=9000),
        ]
        customer = Musteri(Ad='Deniz İnşaat', Firma='Deniz A.Ş.')
        db.session.add_all(people + [customer])
        db.session.commit()
        return {
            'personnel_ids': [p.PersonelID for p in people],
            'customer_id': customer.MusteriID,
        }


class TestClientApi(ApiClient):
    """ApiClient that talks to the Flask test client instead of a socket."""

    __test__ = False

    def __init__(self, flask_client):
        super().__init__(base_url='http://localhost', cache=QueryCache())
        self.flask_client = flask_client
        self._lock = threading.Lock()

    def request(self, method, path, payload=None):
        with self._lock:
            rv = self.flask_client.open(path, method=method, json=payload)
        if rv.status_code >= 400:
            body = rv.get_json(silent=True) or {}
            raise ApiError(rv.status_code, body.get('message') or rv.status)
        return rv.get_json(silent=True)


@pytest.fixture
def api(client):
    return TestClientApi(client)
