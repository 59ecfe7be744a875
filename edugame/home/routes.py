# edugame/home/routes.py
from flask import Blueprint, abort, current_app, jsonify, request, send_from_directory

bp = Blueprint("home", __name__)


@bp.get("/")
def index():
    return send_from_directory(current_app.config["STATIC_ROOT"], "index.html")


@bp.get("/health")
def health_check():
    return jsonify({"status": "ok"})


# werkzeug ranks this below every fixed API path; any other method on an
# unknown path is a 404, not a 405
@bp.route("/<path:filename>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def client_asset(filename):
    if request.method != "GET":
        abort(404)
    return send_from_directory(current_app.config["STATIC_ROOT"], filename)
