from flask import Blueprint, current_app, jsonify

from edugame import limiter
from ..errors import InvalidCredential, InvalidField, NotFound
from ..players import queries
from ..utils.request_data import json_body, require_text
from .helpers import bind_player, end_session, get_current_player, get_current_player_id, login_required
from .passwords import hash_password, verify_password

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/create-player")
@limiter.limit("20 per hour")
def create_player():
    data = json_body()
    username = require_text(data, "username", "Username").strip()
    password = require_text(data, "password", "Password", strip=False)
    if len(username) > 100:
        raise InvalidField("Username must be at most 100 characters")
    email = data.get("email")
    if email is not None and not isinstance(email, str):
        raise InvalidField("email must be a string")
    email = (email or "").strip() or None

    player = queries.create_player(username, hash_password(password), email=email)
    return jsonify({"success": True, "player": player.to_dict()}), 201


@auth_bp.post("/login")
@limiter.limit("5 per minute")
def login():
    data = json_body()
    username = require_text(data, "username", "Username").strip()
    password = require_text(data, "password", "Password", strip=False)

    player = queries.get_player_by_username(username)
    if player is None:
        raise NotFound("Player not found")
    if not verify_password(password, player.password):
        current_app.logger.info("Failed login for %s", username)
        raise InvalidCredential("Invalid password")

    bind_player(player)
    current_app.logger.info("Player %s logged in", username)
    return jsonify({"success": True, "player": player.summary()})


@auth_bp.post("/api/logout")
def logout():
    end_session()
    return jsonify({"success": True})


@auth_bp.get("/api/current-user")
@login_required
def current_user_profile():
    return jsonify(get_current_player().to_dict())


@auth_bp.post("/api/change-password")
@login_required
def change_password():
    data = json_body()
    current = require_text(data, "currentPassword", strip=False)
    new = require_text(data, "newPassword", strip=False)

    player = get_current_player()
    if not verify_password(current, player.password):
        raise InvalidCredential("Current password is incorrect")

    queries.set_password(player, hash_password(new))
    current_app.logger.info("Player %s changed password", player.username)
    return jsonify({"success": True})


@auth_bp.post("/api/delete-account")
@login_required
def delete_account():
    player = get_current_player()
    queries.delete_player(player)
    end_session()
    return jsonify({"success": True})


@auth_bp.post("/api/logout-others")
@login_required
def logout_others():
    # Sessions are not indexed by player, so there is nothing to revoke here.
    current_app.logger.info("logout-others requested by player %s (no-op)", get_current_player_id())
    return jsonify({"success": True})
