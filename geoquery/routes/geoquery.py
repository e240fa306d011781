# geoquery/routes/geoquery.py
"""Query routes and blueprint configuration."""

import logging

from flask import Blueprint, jsonify, request

from geoquery.api.outcome import InvalidQueryError

logger = logging.getLogger(__name__)


def create_geoquery_blueprint(service):
    """Create and configure the query blueprint.

    Args:
        service: QueryService handling the requests

    Returns:
        Configured Flask Blueprint
    """
    geoquery_bp = Blueprint("geoquery", __name__)

    @geoquery_bp.route("/api/process-query", methods=["POST"])
    async def api_process_query():
        """Resolve a natural-language query into map locations."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        try:
            result = await service.process_query(data.get("query"))
        except InvalidQueryError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.exception("Server error while processing query")
            return jsonify({"error": "Failed to process query", "details": str(e)}), 500

        return jsonify(result.to_dict())

    @geoquery_bp.route("/api/example-queries", methods=["GET"])
    async def api_example_queries():
        """Example prompts for the search box."""
        examples = await service.get_example_queries()
        return jsonify({"examples": examples})

    @geoquery_bp.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok", "service": "geoquery"})

    return geoquery_bp


__all__ = ["create_geoquery_blueprint"]
