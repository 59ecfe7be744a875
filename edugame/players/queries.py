# edugame/players/queries.py
import json
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..db import db
from ..errors import Conflict, InsufficientCoins, NotFound
from ..models import Player

log = logging.getLogger(__name__)


def get_player_by_id(player_id):
    return db.session.get(Player, player_id)


def get_player_by_username(username):
    return db.session.execute(
        select(Player).filter_by(username=username)
    ).scalar_one_or_none()


def list_players():
    return db.session.execute(select(Player).order_by(Player.id)).scalars().all()


def create_player(username, password_hash, email=None):
    # Pre-check to give a friendly message before we hit the unique constraint
    if get_player_by_username(username) is not None:
        raise Conflict(f"Username '{username}' is already taken")

    player = Player(username=username, password=password_hash, email=email)
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(f"Username '{username}' is already taken")
    log.info("Created player %s (id=%s)", username, player.id)
    return player


def update_profile(player, changes):
    """Apply only the keys present in ``changes``."""
    for column, value in changes.items():
        setattr(player, column, value)
    db.session.commit()
    return player


def set_password(player, password_hash):
    player.password = password_hash
    db.session.commit()


def delete_player(player):
    db.session.delete(player)
    db.session.commit()
    log.info("Deleted player %s (id=%s)", player.username, player.id)


def apply_reward(username, points=0, coins=0):
    """Add point/coin deltas to one player; the row stays locked until commit.

    Raises InsufficientCoins, leaving the row untouched, when the balance
    would drop below zero.
    """
    player = db.session.execute(
        select(Player).filter_by(username=username).with_for_update()
    ).scalar_one_or_none()
    if player is None:
        db.session.rollback()
        raise NotFound()

    new_coins = player.coins + coins
    if new_coins < 0:
        db.session.rollback()
        raise InsufficientCoins(f"Not enough coins: have {player.coins}, need {-coins}")

    player.points += points
    player.coins = new_coins
    db.session.commit()
    return player


def set_coins(username, coins):
    """Overwrite the coin balance. No floor check: callers rely on raw writes."""
    result = db.session.execute(
        update(Player).where(Player.username == username).values(coins=coins)
    )
    db.session.commit()
    if result.rowcount == 0:
        log.warning("update-coins: no player named %r", username)
    return result.rowcount


def save_progress(username, unlocked_levels, coins=None):
    values = {"unlocked_levels": json.dumps(unlocked_levels)}
    if coins is not None:
        values["coins"] = coins
    result = db.session.execute(
        update(Player).where(Player.username == username).values(**values)
    )
    db.session.commit()
    if result.rowcount == 0:
        log.warning("update-progress: no player named %r", username)
    return result.rowcount
