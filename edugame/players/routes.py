from flask import Blueprint, current_app, jsonify

from ..auth.helpers import get_current_player, login_required
from ..errors import InvalidField, MissingField, NotFound
from ..utils.request_data import coerce_int, json_body, require_text
from . import queries

bp = Blueprint("players", __name__)

# request key -> column
PROFILE_KEYS = {
    "email": "email",
    "displayName": "display_name",
    "theme": "theme",
    "avatar": "avatar",
}


def _player_rows(players):
    include_password = current_app.config.get("EXPOSE_PASSWORD_HASHES", True)
    return [p.to_dict(include_password=include_password) for p in players]


# The client has used all three paths over time
@bp.get("/get-players")
@bp.get("/get-posts")
@bp.get("/players")
def list_players():
    return jsonify(_player_rows(queries.list_players()))


@bp.get("/api/player/<username>")
def get_player(username):
    player = queries.get_player_by_username(username)
    if player is None:
        raise NotFound()
    return jsonify(_player_rows([player])[0])


@bp.post("/api/update-profile")
@login_required
def update_profile():
    data = json_body()
    changes = {}
    for key, column in PROFILE_KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if value is None:
            # null clears a field; theme always has a value
            if column == "theme":
                raise InvalidField("theme cannot be null")
        elif not isinstance(value, str):
            raise InvalidField(f"{key} must be a string")
        changes[column] = value

    player = get_current_player()
    queries.update_profile(player, changes)
    current_app.logger.debug("Profile of %s updated: %s", player.username, sorted(changes))
    return jsonify({"success": True})


@bp.post("/api/upload-avatar")
@login_required
def upload_avatar():
    avatar = require_text(json_body(), "avatar")
    player = get_current_player()
    queries.update_profile(player, {"avatar": avatar})
    return jsonify({"success": True})


@bp.post("/api/reward")
def reward():
    data = json_body()
    username = require_text(data, "username", "Username")
    points = coerce_int(data, "points", default=0)
    coins = coerce_int(data, "coins", default=0)

    player = queries.apply_reward(username, points=points, coins=coins)
    current_app.logger.info("Reward for %s: points%+d coins%+d", username, points, coins)
    return jsonify({"success": True, "message": "Reward applied", "player": player.to_dict()})


@bp.post("/update-coins")
def update_coins():
    data = json_body()
    username = require_text(data, "username", "Username")
    coins = coerce_int(data, "coins", required=True)

    queries.set_coins(username, coins)
    return jsonify({"success": True, "coins": coins})


@bp.post("/update-progress")
def update_progress():
    data = json_body()
    username = require_text(data, "username", "Username")
    coins = coerce_int(data, "coins")
    if "unlockedLevels" not in data:
        raise MissingField("unlockedLevels is required")

    queries.save_progress(username, data["unlockedLevels"], coins=coins)
    return jsonify({"success": True})
