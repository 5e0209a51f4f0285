"""
Auth Routes for the Classroom Dashboard.
Google OAuth sign-in (offline access so we get a refresh token), status and logout.
"""
import logging

from flask import Blueprint, jsonify, redirect, request, session
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow

from dashboard.auth import current_user
from dashboard.config import config, GOOGLE_AUTH_URI, GOOGLE_SCOPES, GOOGLE_TOKEN_URI

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


def _build_flow(state=None):
    client_config = {
        "web": {
            "client_id": config.google_client_id,
            "client_secret": config.google_client_secret,
            "auth_uri": GOOGLE_AUTH_URI,
            "token_uri": GOOGLE_TOKEN_URI,
            "redirect_uris": [config.google_redirect_uri],
        }
    }
    flow = Flow.from_client_config(client_config, scopes=GOOGLE_SCOPES, state=state)
    flow.redirect_uri = config.google_redirect_uri
    return flow


@auth_bp.route('/auth/google')
def google_login():
    """Redirect to Google's consent screen."""
    flow = _build_flow()
    authorization_url, state = flow.authorization_url(
        access_type='offline',
        prompt='consent',
        include_granted_scopes='true',
    )
    session['oauth_state'] = state
    session['oauth_code_verifier'] = flow.code_verifier
    return redirect(authorization_url)


@auth_bp.route('/auth/google/callback')
def google_callback():
    """Exchange the authorization code and store the user in the session."""
    state = session.pop('oauth_state', None)
    code_verifier = session.pop('oauth_code_verifier', None)
    if state is None or request.args.get('state') != state:
        return jsonify({'error': 'Invalid OAuth state'}), 400

    flow = _build_flow(state=state)
    flow.code_verifier = code_verifier
    try:
        flow.fetch_token(authorization_response=request.url)
        credentials = flow.credentials
        profile = id_token.verify_oauth2_token(
            credentials.id_token,
            google_requests.Request(),
            config.google_client_id,
        )
    except Exception as e:
        logger.exception("Google OAuth callback failed")
        return jsonify({'error': 'Authentication failed', 'details': str(e)}), 401

    session['user'] = {
        'id': profile.get('sub'),
        'email': profile.get('email'),
        'name': profile.get('name'),
        'access_token': credentials.token,
        'refresh_token': credentials.refresh_token,
    }
    logger.info("User signed in: %s", profile.get('email'))
    return redirect(config.frontend_url)


@auth_bp.route('/api/auth/status')
def auth_status():
    return jsonify({'isAuthenticated': current_user() is not None})


@auth_bp.route('/api/auth/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': 'Logged out successfully'})
