"""
Routes package for the Inventory API
"""

from flask import jsonify
from sqlalchemy import text

from inventory_api import csrf, db
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.routes")


def init_app(app):
    """Register the auth and API blueprints, error handlers and the health check"""
    logger.debug("Initializing route blueprints")

    from inventory_api.presentation.auth import auth
    from inventory_api.presentation.errors import register_error_handlers
    from inventory_api.presentation.routes.api import inventory, stores, transfers

    # Bearer-token API: no browser forms, so CSRF tokens do not apply
    for blueprint in (auth, transfers.bp, inventory.bp, stores.bp):
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint, url_prefix='/api')

    register_error_handlers(app)

    @app.route('/health')
    def health():
        db.session.execute(text('SELECT 1'))
        return jsonify({'status': 'ok'})

    logger.info("Registered API blueprints")
