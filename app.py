import logging

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db, socketio
import models  # Register models before create_all
from routes import auth_bp, user_bp, company_bp, agent_bp, contact_bp, thread_bp, message_bp, utils_bp
from routes.converters import IdConverter
from services.errors import ApiError
from services.notifier import SocketIONotifier

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        logger.warning("Database integrity error: %s", e.orig)
        return jsonify({"success": False, "message": "Resource already exists"}), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"success": False, "message": e.description or e.name}), e.code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"success": False, "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({"success": False, "message": "The method is not allowed for the requested URL."}), 405

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify({"success": False, "message": "Internal server error"}), 500


def create_app(config_class=Config, notifier=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )

    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    db.init_app(app)
    origins = app.config["CORS_ORIGINS"]
    socketio.init_app(app, cors_allowed_origins="*" if "*" in origins else origins)
    app.extensions["notifier"] = notifier or SocketIONotifier(socketio)

    app.url_map.converters["id"] = IdConverter

    app.register_blueprint(utils_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(user_bp)
    app.register_blueprint(company_bp)
    app.register_blueprint(agent_bp)
    app.register_blueprint(contact_bp)
    app.register_blueprint(thread_bp)
    app.register_blueprint(message_bp)

    register_error_handlers(app)

    if not app.config.get("JWT_SECRET"):
        logger.warning("JWT_SECRET is not set, bearer tokens are signed with SECRET_KEY")

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    logger.info("Server (%s) running on http://%s:%s", app.config["APP_ENV"], app.config["HOST"], app.config["PORT"])
    socketio.run(app, host=app.config["HOST"], port=app.config["PORT"], allow_unsafe_werkzeug=True)
