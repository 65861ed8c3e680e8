"""
Pytest configuration and fixtures for pickup games tests.
"""
import os
import sys
import pytest
from flask import Flask

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'

from pickup.app import create_app
from pickup.models import db
from pickup.game_roster import GameRoster
from pickup.game_catalog import GameCatalog
from pickup.player_directory import PlayerDirectory
from pickup.store import MemoryDocumentStore


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        # Clear all tables before each test
        db.session.remove()

        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


@pytest.fixture(params=['memory', 'sql'])
def store(request, app):
    """Each document store backend that runs without external services."""
    if request.param == 'memory':
        return MemoryDocumentStore()

    request.getfixturevalue('db_session')
    return app.store


@pytest.fixture
def file_db_app(tmp_path):
    """An app on a SQLite file, so threads each get their own connection."""
    file_app = Flask('pickup-file-db')
    file_app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{tmp_path / 'pickup.db'}"
    db.init_app(file_app)

    with file_app.app_context():
        db.create_all()

    yield file_app

    with file_app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def roster(store):
    return GameRoster(store)


@pytest.fixture
def catalog(store):
    return GameCatalog(store)


@pytest.fixture
def directory(store):
    return PlayerDirectory(store)


@pytest.fixture
def make_game(roster):
    """Create a game with sensible defaults, overriding any field."""
    def factory(**overrides):
        fields = {
            'title': 'Sunday Hoops',
            'sport': 'Basketball',
            'location': 'Riverside Park',
            'date': '2026-11-01',
            'time': '10:00',
            'players_needed': 2,
        }
        fields.update(overrides)
        return roster.create_game(**fields)
    return factory


@pytest.fixture
def signed_in(client, mocker):
    """Sign the test client in as alice@example.com."""
    mocker.patch('pickup.auth.get_firebase_app')
    mocker.patch(
        'pickup.auth.firebase_auth.verify_id_token',
        return_value={'uid': 'uid-alice', 'email': 'alice@example.com', 'name': 'Alice'}
    )
    response = client.post('/session', json={'idToken': 'valid-token'})
    assert response.status_code == 200
    return client
