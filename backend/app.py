"""
Flask Application Factory

Wires the typed routing layer into a Flask app:
- Request context + X-Request-ID on every request
- Per-request logging
- CORS
- Error handlers that keep the {"errors": [...]} shape
- Route registration (routes.router)
"""

import logging

from flask import Flask
from flask_cors import CORS

from config import Config
from api.context import REQUEST_ID_HEADER


logger = logging.getLogger('app')

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('api').setLevel(level)


def _cors_origins(origins):
    # flask-cors matches list entries as patterns and echoes the Origin;
    # only the bare string '*' answers with a literal wildcard
    if not origins or origins == '*' or list(origins) == ['*']:
        return '*'
    return origins


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    _configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Keep handler key order in JSON bodies ({"id", "name", "age"})
    app.json.sort_keys = False

    CORS(app,
         origins=_cors_origins(app.config.get('CORS_ORIGINS')),
         expose_headers=[REQUEST_ID_HEADER])

    # === REQUEST CONTEXT MIDDLEWARE ===
    # Opens the RequestContext first so every later hook sees the request id
    from api.middleware import setup_request_id_middleware
    setup_request_id_middleware(app)

    # Per-request logging (sampling + watchlist)
    from api.middleware import setup_request_logging_middleware
    setup_request_logging_middleware(app)

    # 4xx/5xx in the same {"errors": [...]} shape as validation failures
    from api.middleware import setup_error_handlers
    setup_error_handlers(app)

    # Register routes (route modules register on import)
    from routes import router
    app.register_blueprint(router)
    logger.info("Routes registered: %d", len(list(app.url_map.iter_rules())))

    return app


def run_app():
    """Main entry point for local development - starts Flask's dev server."""
    app = create_app()
    print("=" * 60)
    print(f"Starting Flask API on http://{app.config['HOST']}:{app.config['PORT']}")
    print("=" * 60)
    app.run(debug=app.config['DEBUG'], host=app.config['HOST'], port=app.config['PORT'])


if __name__ == "__main__":
    run_app()
