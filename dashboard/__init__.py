"""
Classroom Dashboard Backend Package
===================================

Flask-based backend for the teacher-facing Google Classroom dashboard.

Structure:
- routes/: API route blueprints
- services/: Google API client handle and the course/work/submission aggregators
- config.py: Configuration management
- auth.py: Session authentication hook
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
