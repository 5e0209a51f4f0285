"""
Classroom Dashboard API Routes
==============================

All API route blueprints for the dashboard.

Usage:
    from dashboard.routes import register_routes
    register_routes(app)
"""
from .auth_routes import auth_bp
from .classroom_routes import classroom_bp
from .document_routes import document_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(classroom_bp)
    app.register_blueprint(document_bp)


__all__ = [
    'register_routes',
    'auth_bp',
    'classroom_bp',
    'document_bp',
]
