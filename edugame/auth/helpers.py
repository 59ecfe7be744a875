from functools import wraps

from flask import current_app, session
from flask_login import LoginManager, current_user, login_user, logout_user

from ..db import db
from ..errors import NotFound, Unauthenticated
from ..models import Player

login_manager = LoginManager()


def init_auth(app):
    """Wire Flask-Login to the player table."""
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_player(player_id):
        try:
            return db.session.get(Player, int(player_id))
        except (TypeError, ValueError):
            return None


def login_required(f):
    """Reject requests without a bound session before the view runs."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if session.get("player_id") is None:
            raise Unauthenticated()
        return f(*args, **kwargs)
    return decorated_function


def bind_player(player):
    # fresh token on every login; the pre-login one is dropped
    store = current_app.extensions["session_store"]
    store.destroy(session.sid)
    session.sid = store.new_token()
    login_user(player)
    session["player_id"] = player.id
    session["username"] = player.username


def end_session():
    """Drop the current session record right away, not at response time."""
    logout_user()
    current_app.extensions["session_store"].destroy(getattr(session, "sid", None))
    session.clear()


def get_current_player():
    """The player bound to this session; NotFound if the row has gone."""
    if current_user.is_authenticated:
        return current_user._get_current_object()
    raise NotFound()


def get_current_player_id():
    return session.get("player_id")
