"""
Configuration management for the Classroom Dashboard backend.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Google OAuth
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:3000/auth/google/callback")
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

GOOGLE_SCOPES = [
    'openid',
    'https://www.googleapis.com/auth/userinfo.profile',
    'https://www.googleapis.com/auth/userinfo.email',
    'https://www.googleapis.com/auth/classroom.courses.readonly',
    'https://www.googleapis.com/auth/classroom.rosters.readonly',
    'https://www.googleapis.com/auth/classroom.coursework.students',
    'https://www.googleapis.com/auth/classroom.coursework.me',
    'https://www.googleapis.com/auth/classroom.announcements',
    'https://www.googleapis.com/auth/classroom.topics.readonly',
    'https://www.googleapis.com/auth/classroom.profile.emails',
    'https://www.googleapis.com/auth/classroom.profile.photos',
    'https://www.googleapis.com/auth/drive.readonly',
    'https://www.googleapis.com/auth/documents.readonly',
]

# Session / front end
SESSION_SECRET = os.getenv("SESSION_SECRET", "classroom-dashboard-dev-secret")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# API Configuration
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANALYSIS_MODEL = os.getenv("ANALYSIS_MODEL", "claude-sonnet-4-20250514")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")

# Upper bound on concurrent upstream calls per aggregation
MAX_FANOUT_WORKERS = int(os.getenv("MAX_FANOUT_WORKERS", "10"))

if DEBUG:
    # oauthlib refuses plain-http redirect URIs (localhost) unless told otherwise
    os.environ.setdefault("OAUTHLIB_INSECURE_TRANSPORT", "1")
# Google may grant a subset or superset of the requested scopes
os.environ.setdefault("OAUTHLIB_RELAX_TOKEN_SCOPE", "1")


class Config:
    """Application configuration class."""

    def __init__(self):
        self.google_client_id = GOOGLE_CLIENT_ID
        self.google_client_secret = GOOGLE_CLIENT_SECRET
        self.google_redirect_uri = GOOGLE_REDIRECT_URI
        self.frontend_url = FRONTEND_URL
        self.anthropic_api_key = ANTHROPIC_API_KEY
        self.analysis_model = ANALYSIS_MODEL
        self.max_fanout_workers = MAX_FANOUT_WORKERS
        self.debug = DEBUG


# Global config instance
config = Config()
