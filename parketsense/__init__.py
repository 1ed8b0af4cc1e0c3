"""Flask application factory."""
from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from parketsense.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Error tracking in production only
    sentry_dsn = app.config.get('SENTRY_DSN')
    if sentry_dsn and (app.config.get('ENV') == 'production' or os.getenv('FLASK_ENV') == 'production'):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    from parketsense.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    init_db(app)

    # Auth stub for the JSON API
    from parketsense.middleware import check_api_key

    @app.before_request
    def before_request_handler():
        if request.path.startswith('/api/'):
            check_api_key()

    # Error Handlers
    from parketsense.exceptions import ParketsenseError

    @app.errorhandler(ParketsenseError)
    def handle_parketsense_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"ParketsenseError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"ParketsenseError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'status': 'error', 'message': error.name}), error.code

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from parketsense.blueprints.clients import clients_bp
    from parketsense.blueprints.projects import projects_bp
    from parketsense.blueprints.variants import variants_bp
    from parketsense.blueprints.products import products_bp
    from parketsense.blueprints.offers import offers_bp
    from parketsense.blueprints.orders import orders_bp
    from parketsense.blueprints.architect_payments import architect_payments_bp
    from parketsense.blueprints.metrics import metrics_bp

    app.register_blueprint(clients_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(variants_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(offers_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(architect_payments_bp)
    app.register_blueprint(metrics_bp)

    from parketsense.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"Parketsense started (env={app.config.get('ENV')}, business={app.config.get('BUSINESS_NAME')})")

    return app
