"""
Integration tests for HTTP routes.
Tests pages, the contact form, game and player flows and sign-in.
"""
import pytest
import json

from pickup.store import StoreError


def create_game(client, **overrides):
    form = {
        'title': 'Sunday Hoops',
        'sport': 'Basketball',
        'location': 'Riverside Park',
        'date': '2026-11-01',
        'time': '10:00',
        'playersNeeded': '2',
    }
    form.update(overrides)
    return client.post('/games', data=form)


def only_game(app):
    [game] = app.catalog.list_games()
    return game


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_check(self, client):
        response = client.get('/health')
        assert response.status_code == 200

        data = json.loads(response.data)
        assert data['status'] == 'healthy'
        assert data['store'] == 'sql'


class TestStaticPages:
    """Tests for the marketing pages."""

    @pytest.mark.parametrize('path', ['/', '/about', '/services', '/contact'])
    def test_page_served(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert b'<html' in response.data

    def test_contact_submission_echoes_name(self, client):
        response = client.post('/submit-contact', data={
            'name': 'Jordan', 'email': 'j@example.com', 'message': 'Hi!'
        })

        assert response.status_code == 200
        assert b'Thank you, Jordan!' in response.data

    def test_contact_submission_escapes_name(self, client):
        response = client.post('/submit-contact', data={'name': '<script>x</script>'})

        assert b'<script>' not in response.data
        assert b'&lt;script&gt;' in response.data


class TestGameCreation:
    """Tests for creating games."""

    def test_new_game_form(self, client):
        response = client.get('/games/new')
        assert response.status_code == 200
        assert b'playersNeeded' in response.data

    def test_create_game_redirects(self, client, app):
        """POST /games should store the game and redirect to the list."""
        response = create_game(client, title='Friday Futsal', sport='Soccer')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/games')

        game = only_game(app)
        assert game['title'] == 'Friday Futsal'
        assert game['playersNeeded'] == 2
        assert game['roster'] == []

    def test_create_game_bad_capacity(self, client, app):
        response = create_game(client, playersNeeded='many')

        assert response.status_code == 400
        assert app.catalog.list_games() == []

    def test_anonymous_creator_claims_from_form(self, client, app):
        create_game(client, createdBy='Sam', creatorEmail='sam@example.com')

        game = only_game(app)
        assert game['createdBy'] == 'Sam'
        assert game['creatorEmail'] == 'sam@example.com'
        assert game['creatorVerified'] is False

    def test_signed_in_creator_claims(self, signed_in, app):
        """Signed-in callers are recorded as the creator, whatever the form says."""
        create_game(signed_in, createdBy='Someone Else', creatorEmail='else@example.com')

        game = only_game(app)
        assert game['createdBy'] == 'Alice'
        assert game['creatorEmail'] == 'alice@example.com'
        assert game['creatorVerified'] is True


class TestGameList:
    """Tests for GET /games."""

    def test_list_games(self, client):
        create_game(client, title='Sunday Hoops')
        create_game(client, title='Beach Volley', sport='Volleyball', location='Shoreline')

        response = client.get('/games')

        assert response.status_code == 200
        assert b'Sunday Hoops' in response.data
        assert b'Beach Volley' in response.data

    def test_filter_by_sport(self, client):
        create_game(client, title='Sunday Hoops')
        create_game(client, title='Beach Volley', sport='Volleyball', location='Shoreline')

        response = client.get('/games?sport=Volleyball')

        assert b'Beach Volley' in response.data
        assert b'Sunday Hoops' not in response.data

    def test_search(self, client):
        create_game(client, title='Sunday Hoops')
        create_game(client, title='Beach Volley', sport='Volleyball', location='Shoreline')

        response = client.get('/games?search=SHORE')

        assert b'Beach Volley' in response.data
        assert b'Sunday Hoops' not in response.data

    def test_search_without_results(self, client):
        response = client.get('/games?search=nothing')
        assert b'No games match your search.' in response.data


class TestJoinGame:
    """Tests for POST /games/join/<id>."""

    def test_join(self, client, app):
        create_game(client, playersNeeded='2')
        game_id = only_game(app)['id']

        response = client.post(f'/games/join/{game_id}', data={'name': 'Alice', 'phone': '555'})

        assert response.status_code == 302
        game = only_game(app)
        assert game['playersNeeded'] == 1
        assert game['roster'] == [{'name': 'Alice', 'phone': '555'}]

    def test_join_twice(self, client, app):
        create_game(client, playersNeeded='2')
        game_id = only_game(app)['id']

        client.post(f'/games/join/{game_id}', data={'name': 'Alice'})
        response = client.post(f'/games/join/{game_id}', data={'name': 'Alice'}, follow_redirects=True)

        assert b'already on the roster' in response.data
        assert only_game(app)['playersNeeded'] == 1

    def test_join_full_game(self, client, app):
        """Joining a full game still redirects, and nothing changes."""
        create_game(client, playersNeeded='0')
        game_id = only_game(app)['id']

        response = client.post(f'/games/join/{game_id}', data={'name': 'Bob'})

        assert response.status_code == 302
        game = only_game(app)
        assert game['playersNeeded'] == 0
        assert game['roster'] == []

    def test_join_without_body(self, client, app):
        create_game(client, playersNeeded='1')
        game_id = only_game(app)['id']

        client.post(f'/games/join/{game_id}')

        assert only_game(app)['roster'] == [{'name': 'Anonymous', 'phone': ''}]

    def test_join_nonexistent(self, client):
        """Unknown games get a plain-text message, not an error status."""
        response = client.post('/games/join/nonexistent', data={'name': 'Alice'})

        assert response.status_code == 200
        assert response.mimetype == 'text/plain'
        assert b'Game not found' in response.data


class TestDeleteGame:
    """Tests for POST /games/delete/<id>."""

    def test_delete_anonymous_game(self, client, app):
        create_game(client)
        game_id = only_game(app)['id']

        response = client.post(f'/games/delete/{game_id}')

        assert response.status_code == 302
        assert app.catalog.list_games() == []

    def test_delete_nonexistent(self, client):
        response = client.post('/games/delete/nonexistent')
        assert response.status_code == 302

    def test_delete_with_secret_code(self, client, app):
        create_game(client, secretCode='1234')
        game_id = only_game(app)['id']

        rejected = client.post(f'/games/delete/{game_id}?code=0000')
        assert rejected.status_code == 403
        assert rejected.mimetype == 'text/plain'
        assert len(app.catalog.list_games()) == 1

        accepted = client.post(f'/games/delete/{game_id}?code=1234')
        assert accepted.status_code == 302
        assert app.catalog.list_games() == []

    def test_delete_owned_game_by_stranger(self, signed_in, app):
        """A game created while signed in belongs to that account."""
        create_game(signed_in)
        game_id = only_game(app)['id']
        signed_in.post('/logout')

        response = signed_in.post(f'/games/delete/{game_id}')

        assert response.status_code == 403
        assert len(app.catalog.list_games()) == 1

    def test_form_email_does_not_lock_game(self, client, app):
        """An email typed in by an anonymous creator is not an ownership claim."""
        create_game(client, creatorEmail='alice@example.com')
        game_id = only_game(app)['id']

        response = client.post(f'/games/delete/{game_id}')

        assert response.status_code == 302
        assert app.catalog.list_games() == []

    def test_delete_owned_game_by_creator(self, signed_in, app):
        create_game(signed_in)
        game_id = only_game(app)['id']

        response = signed_in.post(f'/games/delete/{game_id}')

        assert response.status_code == 302
        assert app.catalog.list_games() == []


class TestPlayers:
    """Tests for player card routes."""

    def test_new_player_form(self, client):
        response = client.get('/players/new')
        assert response.status_code == 200

    def test_create_and_list(self, client, app):
        response = client.post('/players', data={
            'name': 'Dana', 'primarySport': 'Volleyball', 'skillLevel': 'Advanced'
        })

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/players')

        [player] = app.players.list_players()
        assert player['name'] == 'Dana'
        assert player['skillLevel'] == 'Advanced'

        page = client.get('/players')
        assert b'Dana' in page.data


class TestAuth:
    """Tests for sign-in routes."""

    @pytest.mark.parametrize('path', ['/login', '/signup'])
    def test_auth_pages(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert b'firebase-auth.js' in response.data

    def test_session_with_valid_token(self, signed_in):
        page = signed_in.get('/games')
        assert b'Hi, Alice' in page.data

    def test_session_with_invalid_token(self, client, mocker):
        from firebase_admin import auth as firebase_auth

        mocker.patch('pickup.auth.get_firebase_app')
        mocker.patch(
            'pickup.auth.firebase_auth.verify_id_token',
            side_effect=firebase_auth.InvalidIdTokenError('bad token')
        )

        response = client.post('/session', json={'idToken': 'forged'})

        assert response.status_code == 401

    def test_session_without_token(self, client):
        response = client.post('/session', json={})
        assert response.status_code == 401

    def test_logout(self, signed_in):
        response = signed_in.post('/logout')

        assert response.status_code == 302
        assert b'Hi, Alice' not in signed_in.get('/games').data


class TestErrorHandling:
    """Store failures surface as plain-text 500s."""

    def test_store_error_becomes_500(self, client, app, mocker):
        mocker.patch.object(app.catalog, 'list_games', side_effect=StoreError('database unreachable'))

        response = client.get('/games')

        assert response.status_code == 500
        assert response.mimetype == 'text/plain'


class TestAppFactory:
    """Table creation on startup follows AUTO_CREATE_TABLES."""

    def test_development_creates_tables(self, mocker):
        from pickup.app import create_app
        from pickup.models import db

        create_all = mocker.patch.object(db, 'create_all')

        create_app('testing')

        create_all.assert_called_once()

    def test_production_leaves_tables_to_deploy_script(self, mocker):
        from pickup.app import create_app
        from pickup.config import ProductionConfig
        from pickup.models import db

        mocker.patch.object(ProductionConfig, 'STORE_BACKEND', 'sql')
        mocker.patch.object(ProductionConfig, 'SQLALCHEMY_DATABASE_URI', 'sqlite:///:memory:')
        mocker.patch.object(ProductionConfig, 'AUTO_CREATE_TABLES', False)
        create_all = mocker.patch.object(db, 'create_all')

        app = create_app('production')

        assert app.store.backend == 'sql'
        create_all.assert_not_called()
