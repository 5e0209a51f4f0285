"""
Classroom Dashboard Services
===========================

Google API access and aggregation logic behind the dashboard routes.

Services:
- google_client: explicit Classroom/Drive/Docs client handle
- pagination: cursor-based page collector
- fanout: bounded, order-preserving fan-out/fan-in
- courses: course list with student counts, rosters, topics, announcements
- coursework: course work with submission stats, calendar, materials
- submissions: detailed submissions and grading
- drive_service: Drive/Docs file content
- writing_analysis: gamified writing feedback via Claude
"""

# Services are imported directly when needed
# Example: from dashboard.services.courses import get_courses

__all__ = [
    'google_client',
    'pagination',
    'fanout',
    'courses',
    'coursework',
    'submissions',
    'drive_service',
    'writing_analysis',
]
