"""
Flask API for the ReAct calendar pipeline.
Accepts scheduling requests and exposes stored events and reasoning logs.
"""

import logging
import sqlite3
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from config.settings import Settings, get_settings
from src.core.pipeline import CalendarPipeline, RequestValidationError, build_pipeline
from src.data.database import get_statistics

logger = logging.getLogger(__name__)


def handle_db_errors(f):
    """Decorator to handle database errors."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except sqlite3.Error as e:
            logger.error(f"Database error in {f.__name__}: {e}")
            return jsonify({"error": str(e)}), 500
    return wrapper


def create_app(pipeline: Optional[CalendarPipeline] = None,
               settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app around a pipeline (wired from settings if not given)."""
    settings = settings or get_settings()
    pipeline = pipeline or build_pipeline(settings)

    app = Flask(__name__)
    CORS(app)

    @app.route("/")
    def index():
        """API info."""
        return jsonify({
            "name": "ReAct Calendar API",
            "endpoints": {
                "/api/process-query": "Process a scheduling request (POST with {email, query})",
                "/api/events/<email>": "Calendar events for a requester, newest first",
                "/api/logs/<email>": "Recent ReAct logs for a requester",
                "/stats": "Database statistics"
            }
        })

    @app.route("/api/process-query", methods=["POST"])
    def process_query():
        """Run a scheduling request through the pipeline."""
        data = request.get_json(silent=True) or {}
        try:
            result = pipeline.handle(data.get("email"), data.get("query"))
        except RequestValidationError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            logger.error(f"Error processing query: {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify(result.to_dict())

    @app.route("/api/events/<email>")
    @handle_db_errors
    def list_events(email):
        """List calendar events for a requester."""
        events = pipeline.event_store.query_by_identity(email)
        return jsonify({"events": events})

    @app.route("/api/logs/<email>")
    @handle_db_errors
    def list_logs(email):
        """List the most recent ReAct logs for a requester."""
        limit = max(0, request.args.get("limit", settings.logs_limit, type=int))
        logs = pipeline.audit_store.query_by_identity(email, limit=limit)
        return jsonify({"logs": logs})

    @app.route("/stats")
    @handle_db_errors
    def stats():
        """Get database statistics."""
        return jsonify(get_statistics(settings.db_path))

    return app
