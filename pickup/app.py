import logging
import os
from flask import Flask, request, jsonify
from markupsafe import escape

from .config import config
from .models import db
from .auth import login_manager
from .store import StoreError, create_store
from .game_roster import GameRoster
from .game_catalog import GameCatalog
from .player_directory import PlayerDirectory
from .responses import plain_text

logger = logging.getLogger(__name__)

STATIC_PAGES = {
    '/': 'index.html',
    '/about': 'about.html',
    '/services': 'services.html',
    '/contact': 'contact.html',
}


def create_app(config_name: str = None) -> Flask:
    """Application factory for the pickup games site."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__,
                template_folder='templates',
                static_folder='static')
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'

    store = create_store(app)

    if store.backend == 'sql' and app.config['AUTO_CREATE_TABLES']:
        with app.app_context():
            db.create_all()

    # Store services on app for access in routes
    app.store = store
    app.roster = GameRoster(store, enforce_ownership=app.config['ENFORCE_GAME_OWNERSHIP'])
    app.catalog = GameCatalog(store)
    app.players = PlayerDirectory(store)

    register_routes(app)
    register_error_handlers(app)

    from .routes import games, players, auth
    app.register_blueprint(games.bp)
    app.register_blueprint(players.bp)
    app.register_blueprint(auth.bp)

    return app


def register_routes(app: Flask):
    """Register static pages, the contact form and the health check."""

    def make_page_view(filename):
        def view():
            return app.send_static_file(filename)
        return view

    for path, filename in STATIC_PAGES.items():
        endpoint = 'page_' + (filename.rsplit('.', 1)[0])
        app.add_url_rule(path, endpoint, make_page_view(filename))

    @app.route('/submit-contact', methods=['POST'])
    def submit_contact():
        """Acknowledge a contact form submission. Nothing is stored."""
        name = request.form.get('name', '')
        logger.info(
            f"Contact form submission from {name} <{request.form.get('email', '')}>: "
            f"{request.form.get('message', '')}"
        )
        return f"""
        <body style="font-family: system-ui; text-align: center; padding-top: 50px;">
            <h1>Thank you, {escape(name)}!</h1>
            <p>We received your message and will get back to you soon.</p>
            <a href="/" style="font-weight: bold; color: #10B981;">&larr; Go Back Home</a>
        </body>
        """

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        store_ok = app.store.ping()
        return jsonify({
            'status': 'healthy' if store_ok else 'unhealthy',
            'store': app.store.backend,
            'database': 'connected' if store_ok else 'disconnected'
        }), 200 if store_ok else 503


def register_error_handlers(app: Flask):

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        logger.exception(f"Store failure on {request.method} {request.path}: {error}")
        return plain_text("Something went wrong talking to the database", 500)

    @app.errorhandler(500)
    def handle_server_error(error):
        return plain_text("Internal server error", 500)
