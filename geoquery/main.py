"""
GeoQuery – main application entry point

* Flask app serving the JSON API consumed by the map front-end.
* Async views run the resolution pipeline on asyncio; outbound calls are
  dispatched to worker threads with a per-call timeout.
* Run locally with ``python -m geoquery.main``.
"""

import logging

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

from geoquery.api.config import describe_keys, get_cors_config, get_port
from geoquery.api.services.query_service import build_query_service
from geoquery.routes.geoquery import create_geoquery_blueprint

# --------------------------------------------------------------------------- #
# Environment & logging
# --------------------------------------------------------------------------- #
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(service=None):
    """Build the Flask app around a QueryService.

    Args:
        service: Optional pre-built QueryService; defaults to one wired from
            the environment

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    cors = get_cors_config()
    CORS(
        app,
        origins=cors["origins"],
        methods=cors["methods"],
        allow_headers=cors["allow_headers"],
        supports_credentials=cors["supports_credentials"],
    )

    for name, state in describe_keys().items():
        logger.info("%s: %s", name, state)

    app.register_blueprint(create_geoquery_blueprint(service or build_query_service()))
    return app


# Clients are created lazily, so building the app needs no API keys.
# Serve with e.g. `gunicorn geoquery.main:app`.
app = create_app()


# --------------------------------------------------------------------------- #
# Local development runner ( `python -m geoquery.main` )
# --------------------------------------------------------------------------- #
if __name__ == "__main__":
    port = get_port()
    logger.info("Starting geoquery server on http://localhost:%d", port)
    app.run(host="0.0.0.0", port=port, debug=False)


__all__ = ["app", "create_app"]
