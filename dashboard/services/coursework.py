"""
Course work aggregation: work lists and details with submission statistics,
plus the calendar and materials views built on top of them.
"""

import logging
from functools import partial

from dashboard.services.fanout import fan_out
from dashboard.services.pagination import collect_pages

logger = logging.getLogger(__name__)

TURNED_IN_STATES = ('TURNED_IN', 'RETURNED')
STATE_FIELDS = 'studentSubmissions(state),nextPageToken'


def empty_stats():
    return {'studentCount': 0, 'turnedInStudents': 0}


def compute_submission_stats(submissions):
    """Count visible submissions and how many have been turned in (or already returned)."""
    submissions = submissions or []
    return {
        'studentCount': len(submissions),
        'turnedInStudents': sum(1 for s in submissions if s.get('state') in TURNED_IN_STATES),
    }


def get_submission_stats(client, course_id, course_work_id):
    fetch = partial(client.list_submissions, course_id, course_work_id, fields=STATE_FIELDS)
    return compute_submission_stats(collect_pages(fetch))


def get_course_work_list(client, course_id, order_by='updateTime desc', states=None, max_workers=None):
    """
    All course work for a course, each item carrying ``submissionStats``.

    Upstream order is kept. Stats for each item are fetched concurrently;
    an item whose submissions cannot be read gets zero stats.
    """
    fetch = partial(client.list_course_work, course_id, order_by=order_by, course_work_states=states)
    work_items = collect_pages(fetch)

    def with_stats(work):
        return {**work, 'submissionStats': get_submission_stats(client, course_id, work['id'])}

    def zero_stats(work, error):
        logger.warning("Error fetching submission stats for work %s: %s", work.get('id'), error)
        return {**work, 'submissionStats': empty_stats()}

    result = fan_out(with_stats, work_items, max_workers=max_workers, fallback=zero_stats)
    logger.info("Course %s: %d course work item(s) with stats", course_id, len(result))
    return result


def get_course_work_details(client, course_id, course_work_id):
    """Single course work record merged with its submission stats."""
    logger.info("Fetching course work details for course=%s work=%s", course_id, course_work_id)
    work = client.get_course_work(course_id, course_work_id)
    stats = get_submission_stats(client, course_id, course_work_id)
    return {**work, 'submissionStats': stats}


def get_course_calendar(client, course_id, max_workers=None):
    """Published work ordered by due date, trimmed to what a calendar needs."""
    work = get_course_work_list(
        client, course_id,
        order_by='dueDate desc',
        states=['PUBLISHED'],
        max_workers=max_workers,
    )
    return [{
        'id': item.get('id'),
        'title': item.get('title'),
        'dueDate': item.get('dueDate'),
        'type': item.get('workType'),
        'maxPoints': item.get('maxPoints'),
        'submissionStats': item.get('submissionStats'),
    } for item in work]


def get_course_materials(client, course_id):
    """Every material attached to published work, tagged with the work title."""
    fetch = partial(client.list_course_work, course_id, order_by='dueDate desc',
                    course_work_states=['PUBLISHED'])
    materials = []
    for item in collect_pages(fetch):
        for material in item.get('materials') or []:
            materials.append({**material, 'fromAssignment': item.get('title')})
    return materials
