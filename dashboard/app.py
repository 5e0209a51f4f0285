#!/usr/bin/env python3
"""
Classroom Dashboard - Google Classroom backend for teachers
===========================================================
Run: python3 -m dashboard.app
Then point the front end at: http://localhost:3000
"""

import logging
import time

from flask import Flask, g, jsonify, request
from flask_cors import CORS

from dashboard.auth import init_auth
from dashboard.config import config, HOST, PORT, SESSION_SECRET
from dashboard.routes import register_routes
from dashboard.services.google_client import ClassroomClient

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    """Build the Flask app. ``overrides`` is merged into app.config (tests use it)."""
    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=SESSION_SECRET,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        CLASSROOM_CLIENT_FACTORY=ClassroomClient.from_session_user,
        MAX_FANOUT_WORKERS=config.max_fanout_workers,
        DEBUG=config.debug,
    )
    if overrides:
        app.config.update(overrides)

    CORS(app, origins=[config.frontend_url], supports_credentials=True)

    # ══════════════════════════════════════════════════════════════
    # AUTHENTICATION
    # ══════════════════════════════════════════════════════════════
    init_auth(app)

    # ══════════════════════════════════════════════════════════════
    # REQUEST LOGGING
    # ══════════════════════════════════════════════════════════════
    @app.before_request
    def start_timer():
        g.request_started = time.monotonic()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        duration = time.monotonic() - started if started is not None else 0.0
        logger.info(
            "%s %s -> %s (%.2fs)",
            request.method,
            request.path,
            response.status_code,
            duration,
        )
        return response

    @app.route('/')
    def index():
        return jsonify({
            'message': 'Server is running',
            'auth_url': '/auth/google',
            'status_url': '/api/auth/status',
            'courses_url': '/api/courses',
        })

    register_routes(app)
    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    logger.info("Server running on port %s", PORT)
    app.run(host=HOST, port=PORT, debug=config.debug)
