import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .admin_routes import admin_bp
from .auth import auth_bp
from .config import Config, engine_options
from .extensions import cors, db, migrate
from .seed import register_commands


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", engine_options(app.config["SQLALCHEMY_DATABASE_URI"]))

    console_url = app.config.get("ADMIN_CONSOLE_DATABASE_URL")
    if console_url:
        binds = dict(app.config.get("SQLALCHEMY_BINDS") or {})
        binds["console"] = {"url": console_url, "pool_size": 2, "max_overflow": 0, "pool_pre_ping": True}
        app.config["SQLALCHEMY_BINDS"] = binds

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    cors.init_app(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    register_commands(app)

    register_error_handlers(app)

    @app.route("/")
    def index():
        return jsonify({"success": True, "message": "AgroBuizz admin API is running"})

    return app


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"success": False, "message": e.description}), e.code

    # Generic error handler for 500 Internal Server Error
    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.exception("An internal server error occurred: %s", e)
        return jsonify({"success": False, "message": "Internal Server Error"}), 500


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), debug=True)
