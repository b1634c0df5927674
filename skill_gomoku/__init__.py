import os
import logging
from flask import Flask
from .extensions import socketio, jwt, notification_queue
from .globals import log_event
from .workers import start_notification_consumer

logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    'PORT': int,
    'ACCOUNTS_FILE': str,
}

def _load_config(app, config_class):
    """Class defaults, then the instance config.py, then the environment."""
    app.config.from_object(config_class)
    app.config.from_pyfile('config.py', silent=True)

    for key, cast in ENV_OVERRIDES.items():
        value = os.environ.get(key)
        if value:
            app.config[key] = cast(value)

    os.makedirs(app.instance_path, exist_ok=True)
    for key in ('ACCOUNTS_FILE', 'LOG_FILE', 'EVENT_LOG_FILE'):
        app.config[key] = os.path.join(app.instance_path, app.config[key])

def _configure_logging(app):
    """Sets up the file logger."""
    file_handler = logging.FileHandler(app.config['LOG_FILE'], encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)
    app.logger.setLevel(logging.INFO)
    logger.info("File logger configured.")

def _init_extensions(app):
    """Initializes the Flask extensions."""
    socketio.init_app(app, async_mode=app.config.get('SOCKETIO_ASYNC_MODE'))
    jwt.init_app(app)
    logger.info("Flask extensions (SocketIO, JWT) initialized.")

def _init_services(app, timer_factory=None):
    """Builds the services and attaches the Room Manager to the app."""

    # Imported here so services never import the app package at load time.
    from flask_jwt_extended import create_access_token
    from .services.account_service import AccountStore
    from .services.session_registry import SessionRegistry
    from .services.room_registry import RoomRegistry
    from .services.room_service import RoomService

    account_store = AccountStore(app.config['ACCOUNTS_FILE'], log_event_func=log_event)
    session_registry = SessionRegistry(
        issue_token_func=lambda username: create_access_token(identity=username),
        log_event_func=log_event
    )
    registry = RoomRegistry(log_event_func=log_event)

    room_service = RoomService(
        config=app.config,
        account_store=account_store,
        session_registry=session_registry,
        notification_queue=notification_queue,
        registry=registry,
        app=app,
        log_event_func=log_event,
        timer_factory=timer_factory
    )

    app.account_store = account_store
    app.room_service = room_service
    logger.info("Room services (RoomService, Registry, Accounts...) initialized.")

def _register_blueprints(app):
    """Registers the HTTP routes."""
    from .api.main_routes import bp as main_bp
    app.register_blueprint(main_bp)
    logger.info("Blueprints registered.")

def _register_socketio_handlers():
    """Importing the handler modules registers them on `socketio`."""
    from .sockets import connection_handlers  # noqa: F401
    from .sockets import message_handlers  # noqa: F401
    logger.info("SocketIO handlers (connection, message) registered.")

def _run_startup_tasks(app):
    """Startup work that needs the application context."""
    with app.app_context():
        logger.info("Loading accounts...")
        app.account_store.load()

def create_app(config_class='skill_gomoku.config.Config', timer_factory=None):
    """
    Application factory. Returns (app, socketio).
    """

    app = Flask(__name__, instance_relative_config=True)

    # 1. Configuration
    _load_config(app, config_class)

    # 2. Logging
    _configure_logging(app)

    # 3. SocketIO handlers (before init_app, so every new server gets them)
    _register_socketio_handlers()

    # 4. Extensions
    _init_extensions(app)

    # 5. Services
    _init_services(app, timer_factory)

    # 6. Blueprints
    _register_blueprints(app)

    # 7. Startup tasks (accounts file)
    _run_startup_tasks(app)

    # 8. Background consumer
    if app.config['NOTIFICATION_CONSUMER']:
        logger.info("Starting the notification consumer...")
        start_notification_consumer(socketio, notification_queue)

    app.logger.info("Application 'skill-gomoku' created.")
    app.logger.info(f"Accounts file: {app.config['ACCOUNTS_FILE']}")
    app.logger.info(f"Log file: {app.config['LOG_FILE']}")

    return app, socketio
