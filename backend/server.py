"""
Flask application entry point for the patient roster backend.

Registers the patient roster blueprint, the error handlers that turn
roster errors into structured JSON, and the job queue client shared by
every sync request.
"""

import logging

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from roster.config import config
from roster.api.patients import bp as patients_bp
from roster.db.postgres import close_db_session, rollback_session
from roster.errors import RosterError, UpstreamError
from roster.services.job_queue import JobQueueClient

logger = logging.getLogger("server")


def create_app(init_database: bool = False, job_queue: JobQueueClient = None):
    """Create and configure Flask app."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)

    # Load config
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["DEBUG"] = config.DEBUG

    # Built once per process and shared by every sync request
    app.extensions["job_queue"] = job_queue or JobQueueClient()

    @app.after_request
    def after_request(response):
        response.headers.add("Access-Control-Allow-Origin", "*")
        response.headers.add("Access-Control-Allow-Headers", "Content-Type,Authorization")
        response.headers.add("Access-Control-Allow-Methods", "GET,PUT,POST,DELETE,OPTIONS")
        return response

    # Ensure clean session state at the start of each request
    @app.before_request
    def ensure_clean_session():
        rollback_session()

    # Clean up database session at the end of each request
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        close_db_session(exception)

    @app.errorhandler(RosterError)
    def handle_roster_error(error: RosterError):
        logger.error(
            f"{error.error_type} on {request.method} {request.path}: "
            f"{error.message} context={error.context} args={dict(request.args)}"
        )
        return jsonify({"ok": False, "error": error.to_dict()}), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error: SQLAlchemyError):
        logger.exception(f"Record store failure on {request.method} {request.path}")
        wrapped = UpstreamError("Record store request failed")
        return jsonify({"ok": False, "error": wrapped.to_dict()}), wrapped.status_code

    app.register_blueprint(patients_bp)  # /api/v1/patients/*

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    # Initialize database tables if requested (development only)
    if init_database:
        with app.app_context():
            from roster.db.postgres import init_db
            init_db()
            logger.info("Database tables initialized")

    return app


if __name__ == "__main__":
    app = create_app(init_database=False)
    print("[Roster] Starting server on port 5001...")
    print(f"[Roster] Debug mode: {config.DEBUG}")
    print("[Roster] Routes:")
    print("  - /api/v1/patients/* (Patient roster)")
    print("  - /health (Health check)")
    app.run(debug=config.DEBUG, port=5001)
