# grasscard/__init__.py

from flask import Flask, jsonify, redirect, url_for
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager, unset_jwt_cookies
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: the read-only json cards can be embedded elsewhere
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    def _back_to_setup(reason):
        app.logger.info(f"[auth] dropping identity cookie: {reason}")
        resp = redirect(url_for("setup.setup_page"))
        unset_jwt_cookies(resp)
        return resp

    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return _back_to_setup(reason)

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return _back_to_setup(reason)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return _back_to_setup("token has expired")

    # -----------------------------
    # Storage errors
    # -----------------------------
    @app.errorhandler(SQLAlchemyError)
    def storage_error(e):
        db.session.rollback()
        app.logger.exception(f"[db] storage error: {e}")
        return jsonify({"message": "Internal server error"}), 500

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.setup_routes import setup_bp
    from .routes.habit_routes import habits_bp
    from .routes.api_routes import api_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(setup_bp)
    app.register_blueprint(habits_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        from . import models  # noqa: F401  registers tables

        if db.engine.dialect.name == "sqlite":
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)
        db.create_all()

    return app
