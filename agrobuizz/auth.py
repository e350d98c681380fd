from datetime import datetime

from flask import Blueprint, abort, current_app, g, jsonify, request, session

from .extensions import db
from .models import User

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def current_user():
    """The logged-in User for this request, or None."""
    if "current_user" not in g:
        user_id = session.get("user_id")
        g.current_user = db.session.get(User, user_id) if user_id is not None else None
    return g.current_user


def json_body():
    """The request JSON object, or 400 when the body is some other JSON value."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        abort(400, description="Request body must be a JSON object")
    return data


def check_admin():
    """Abort with 401 when nobody is logged in and 403 for non-admins."""
    user = current_user()
    if user is None:
        abort(401, description="Not authenticated")
    if not user.is_admin:
        current_app.logger.warning("User %s denied admin access to %s", user.username, request.path)
        abort(403, description="Not authorized")
    return user


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        username = password = ""
    username = username.strip()
    if not username or not password:
        abort(400, description="Must provide username and password in JSON body")

    user = User.query.filter_by(username=username).first()
    if not user or not user.check_password(password):
        abort(401, description="Invalid username or password")

    user.last_login = datetime.utcnow()
    db.session.commit()

    session.clear()
    session.permanent = True
    session["user_id"] = user.id
    current_app.logger.info("User %s logged in", user.username)
    return jsonify({"success": True, "user": user.to_dict()}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify({"success": True, "message": "Logged out successfully"}), 200


@auth_bp.route("/user", methods=["GET"])
def get_user():
    user = current_user()
    if user is None:
        abort(401, description="Not authenticated")
    return jsonify({"success": True, "user": user.to_dict()}), 200
