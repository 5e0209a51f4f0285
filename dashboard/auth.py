"""
Session authentication for the Classroom Dashboard.
Rejects /api/ calls without a signed-in Google user before they reach a route.
"""
from flask import request, jsonify, session, g


# Routes that don't require authentication
PUBLIC_EXACT = [
    '/api/auth/status',    # Front end polls this before the user signs in
    '/api/auth/logout',
]


def is_public_route(path):
    """Check if a route is public (no auth required)."""
    return path in PUBLIC_EXACT


def current_user():
    """Return the signed-in user stored in the session, or None."""
    user = session.get('user')
    if not user or not user.get('access_token'):
        return None
    return user


def init_auth(app):
    """
    Register the before_request auth hook on the Flask app.
    Call this BEFORE registering blueprints.
    """
    @app.before_request
    def check_auth():
        # Skip non-API routes (OAuth handshake, index)
        if not request.path.startswith('/api/'):
            return None

        if is_public_route(request.path):
            return None

        user = current_user()
        if user is None:
            return jsonify({'error': 'Not authenticated'}), 401

        # Attach user info to Flask's g object for use in route handlers
        g.user = user
        g.user_email = user.get('email', '')
