"""
Course aggregation: course list with student counts, rosters, topics,
announcements and co-teacher invites.
"""

import logging
from functools import partial

from dashboard.services.fanout import fan_out
from dashboard.services.pagination import collect_pages, count_items

logger = logging.getLogger(__name__)

ROSTER_COUNT_PAGE_SIZE = 30
ROSTER_PAGE_SIZE = 100
ROSTER_COUNT_FIELDS = 'students(userId),nextPageToken'
ROSTER_FIELDS = 'students(userId,profile,courseId),nextPageToken'


def count_students(client, course_id):
    """Total roster size for a course, walking every page."""
    fetch = partial(client.list_students, course_id, fields=ROSTER_COUNT_FIELDS)
    return count_items(fetch, page_size=ROSTER_COUNT_PAGE_SIZE)


def get_courses(client, max_workers=None):
    """
    Fetch all active courses, each with a ``studentCount``.

    Counts are resolved concurrently. A course whose roster cannot be read
    (typically missing permission) gets ``studentCount = 0`` instead of
    failing the whole list.
    """
    logger.info("Fetching courses")
    courses = collect_pages(partial(client.list_courses, course_states=['ACTIVE']))

    def with_count(course):
        return {**course, 'studentCount': count_students(client, course['id'])}

    def zero_count(course, error):
        logger.warning("Error getting student count for course %s: %s", course.get('id'), error)
        return {**course, 'studentCount': 0}

    return fan_out(with_count, courses, max_workers=max_workers, fallback=zero_count)


def _to_student(entry):
    profile = entry.get('profile') or {}
    return {
        'id': entry.get('userId'),
        'name': (profile.get('name') or {}).get('fullName'),
        'email': profile.get('emailAddress'),
        'photoUrl': profile.get('photoUrl'),
        'courseId': entry.get('courseId'),
    }


def get_course_students(client, course_id):
    """Full roster of a course, simplified to id/name/email/photo."""
    logger.info("Fetching students for course %s", course_id)
    fetch = partial(client.list_students, course_id, fields=ROSTER_FIELDS)
    entries = collect_pages(fetch, page_size=ROSTER_PAGE_SIZE)
    return [_to_student(entry) for entry in entries]


def get_topics(client, course_id):
    return collect_pages(partial(client.list_topics, course_id))


def create_announcement(client, course_id, text, materials=None):
    """Post a published announcement to the course stream."""
    body = {
        'text': text,
        'materials': materials or [],
        'state': 'PUBLISHED',
    }
    logger.info("Creating announcement in course %s", course_id)
    return client.create_announcement(course_id, body)


def invite_teacher(client, course_id, email):
    logger.info("Adding teacher %s to course %s", email, course_id)
    return client.create_teacher(course_id, email)
