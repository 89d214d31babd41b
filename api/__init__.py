"""Flask application factory for the Accountbook HTTP API."""

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import MethodNotAllowed as WerkzeugMethodNotAllowed
from werkzeug.exceptions import HTTPException, NotFound
from errors import AppError, MethodNotAllowed
from logger import get_logger

logger = get_logger()

SERVICES_KEY = "accountbook.services"


def create_app(services) -> Flask:
    """Create the Flask app.

    Args:
        services: Services container shared by all request handlers.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    app.extensions[SERVICES_KEY] = services
    app.json.ensure_ascii = False

    origins = [o.strip() for o in services.config.cors_origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins or "*"}}, send_wildcard=True)

    from api.users import bp as users_bp
    from api.categories import bp as categories_bp
    from api.transactions import bp as transactions_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(transactions_bp)

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        logger.warning(f"{error.__class__.__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(WerkzeugMethodNotAllowed)
    def handle_method_not_allowed(error):
        return handle_app_error(MethodNotAllowed("不支持的请求方法"))

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        return jsonify({"error": "接口不存在"}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({"error": "服务器内部错误"}), 500

    return app
