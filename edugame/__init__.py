# edugame/__init__.py
from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler

import click
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from .db import db
from .sessions import SessionStore, StoreSessionInterface

# --- extensions ---
migrate = Migrate()
# in-memory limiter; one process, same as the session store
limiter = Limiter(get_remote_address, storage_uri="memory://")


def create_app(config=None, session_store: SessionStore | None = None) -> Flask:
    """Build the app from a config class/object (defaults to ``config.Config``).

    ``session_store`` lets callers share or inspect the session records; a new
    empty store is created otherwise.
    """
    app = Flask(__name__, static_folder=None)

    # ---------------------------
    # Config
    # ---------------------------
    if config is None:
        from config import ProductionConfig, config_by_name
        config = config_by_name.get(os.environ.get("APP_ENV", "production"), ProductionConfig)
    app.config.from_object(config)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError(
            "Missing database configuration. "
            "Set DATABASE_URL or DB_HOST/DB_NAME/DB_USER/DB_PASS."
        )
    if not app.config.get("SECRET_KEY"):
        raise RuntimeError("Missing SECRET_KEY; it signs the session cookie.")

    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if not uri.startswith("sqlite"):
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {
            "pool_size": app.config["DB_POOL_SIZE"],
            "max_overflow": 0,
            "pool_timeout": app.config["DB_POOL_TIMEOUT"],
            "pool_recycle": app.config["DB_POOL_RECYCLE"],
            "pool_pre_ping": True,
        })

    # ---------------------------
    # Logging
    # ---------------------------
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("edugame").setLevel(level)

    log_file = app.config.get("LOG_FILE")
    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=10)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)
        logging.getLogger("edugame").addHandler(file_handler)

    # ---------------------------
    # Extensions init
    # ---------------------------
    store = session_store if session_store is not None else SessionStore()
    app.extensions["session_store"] = store
    app.session_interface = StoreSessionInterface(store)

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    from .auth.helpers import init_auth
    init_auth(app)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # ---------------------------
    # Blueprints
    # ---------------------------
    from .auth.routes import auth_bp
    from .players.routes import bp as players_bp
    from .home.routes import bp as home_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(players_bp)
    app.register_blueprint(home_bp)
    # the static client is never rate limited
    limiter.exempt(home_bp)

    # ---------------------------
    # CLI commands
    # ---------------------------
    @app.cli.command("players-list")
    def players_list():
        """Print every player with points and coins."""
        from .players.queries import list_players
        for player in list_players():
            click.echo(f"{player.id:>5}  {player.username:<30} points={player.points} coins={player.coins}")

    @app.cli.command("reset-password")
    @click.argument("username")
    @click.password_option()
    def reset_password(username, password):
        """Set a new password for USERNAME."""
        from .auth.passwords import hash_password
        from .players.queries import get_player_by_username, set_password
        player = get_player_by_username(username)
        if player is None:
            raise click.ClickException(f"No player named {username!r}")
        set_password(player, hash_password(password))
        click.echo(f"Password updated for {username}.")

    @app.after_request
    def set_security_headers(resp):
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return resp

    app.logger.info("edugame app created (database: %s)", db_label(uri))
    return app


def db_label(uri: str) -> str:
    """Database URI without credentials, for logs."""
    scheme, _, rest = uri.partition("://")
    return f"{scheme}://{rest.rpartition('@')[2]}"
