import logging
import os
from concurrent.futures import ThreadPoolExecutor

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from sqlalchemy import event

from models import db
from routes import register_blueprints
from utils.constants import MAX_CHALLENGE_POINTS
from utils.errors import register_error_handlers

migrate = Migrate()
jwt = JWTManager()


def _env_flag(name, default):
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes", "on")


def _use_sqlite_transactions(engine):
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; emit it ourselves
    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///fuel.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {"pool_pre_ping": True}
    app.config['JSONIFY_PRETTYPRINT_REGULAR'] = True
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret-key')
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'supersecret')
    app.config['MAX_CHALLENGE_POINTS'] = int(os.getenv('MAX_CHALLENGE_POINTS', MAX_CHALLENGE_POINTS))
    app.config['ACHIEVEMENTS_ASYNC'] = _env_flag('ACHIEVEMENTS_ASYNC', True)
    app.config['ACHIEVEMENT_WORKERS'] = int(os.getenv('ACHIEVEMENT_WORKERS', 2))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    CORS(app)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        with app.app_context():
            _use_sqlite_transactions(db.engine)

    if app.config['ACHIEVEMENTS_ASYNC']:
        app.extensions['achievement_executor'] = ThreadPoolExecutor(
            max_workers=app.config['ACHIEVEMENT_WORKERS'],
            thread_name_prefix='achievements',
        )

    #register routes
    register_blueprints(app)
    register_error_handlers(app)

    @app.route("/")
    def home():
        return {"message": "Fuel & Planets backend is running!"}

    return app


if __name__ == "__main__":
    create_app().run(port=5555, debug=True)
