from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from inventory_api.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    """
    Application factory.

    Configuration is read from the environment; values in ``config_overrides``
    win over the environment (tests use this to point at a throwaway database).
    """
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("inventory_api")
    logger.info("Initializing Flask application")

    config_overrides = dict(config_overrides or {})

    # SECURITY: Require SECRET_KEY - no fallback
    app.config['SECRET_KEY'] = config_overrides.get('SECRET_KEY') or os.environ.get('SECRET_KEY')
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file inside
    # the project's `instance/` directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    elif 'SQLALCHEMY_DATABASE_URI' not in config_overrides:
        instance_dir = Path(__file__).parent.parent / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'inventory_api.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # HTTPS/TLS Configuration
    app.config['ENABLE_HTTPS'] = _env_flag('ENABLE_HTTPS', 'True')
    app.config['FORCE_HTTPS_REDIRECT'] = _env_flag('FORCE_HTTPS_REDIRECT', 'True')

    # Rate limiting (Flask-Limiter reads RATELIMIT_ENABLED at init)
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    # API behaviour
    app.config['API_DEFAULT_PER_PAGE'] = int(os.environ.get('API_DEFAULT_PER_PAGE', '15'))
    app.config['API_MAX_PER_PAGE'] = int(os.environ.get('API_MAX_PER_PAGE', '100'))
    app.config['DEFAULT_LOW_STOCK_THRESHOLD'] = int(os.environ.get('DEFAULT_LOW_STOCK_THRESHOLD', '5'))

    app.config.update(config_overrides)

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
        if app.config['FORCE_HTTPS_REDIRECT']:
            logger.info("Automatic HTTP to HTTPS redirect enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - Acceptable for development only!")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from inventory_api.data.core.user import User
    from inventory_api.data.core.store import Store
    from inventory_api.data.catalog.product import Product
    from inventory_api.data.catalog.product_variant import ProductVariant
    from inventory_api.data.inventory.inventory import Inventory
    from inventory_api.data.inventory.inventory_transaction import InventoryTransaction
    from inventory_api.data.inventory.inventory_transfer import InventoryTransfer

    logger.debug("Models imported and registered")

    # Register blueprints and error handlers
    from inventory_api.presentation.routes import init_app as init_routes
    init_routes(app)

    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Cache-Control'] = 'no-store'

        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    logger.info("Flask application initialization complete")

    return app
