"""
Classroom API routes for the dashboard.
Courses, rosters, course work, submissions and grading.
"""
import logging
import traceback

from flask import Blueprint, current_app, g, jsonify, request

from dashboard.services import courses, coursework, submissions
from dashboard.services.submissions import GradeValidationError

classroom_bp = Blueprint('classroom', __name__)
logger = logging.getLogger(__name__)


def get_client():
    """Build the Google client for the signed-in user."""
    factory = current_app.config['CLASSROOM_CLIENT_FACTORY']
    return factory(g.user)


def _workers():
    return current_app.config.get('MAX_FANOUT_WORKERS')


def error_response(message, error, status=500):
    """Generic failure with the underlying message attached for diagnostics."""
    logger.exception("%s: %s", message, error)
    body = {'error': message, 'details': str(error)}
    if current_app.debug:
        body['stack'] = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    return jsonify(body), status


# ══════════════════════════════════════════════════════════════
# COURSES
# ══════════════════════════════════════════════════════════════

@classroom_bp.route('/api/courses')
def list_courses():
    try:
        result = courses.get_courses(get_client(), max_workers=_workers())
        logger.info("Courses fetched for %s: %d", g.user_email, len(result))
        return jsonify(result)
    except Exception as e:
        return error_response('Failed to fetch courses', e)


@classroom_bp.route('/api/courses/<course_id>/students')
def list_students(course_id):
    try:
        students = courses.get_course_students(get_client(), course_id)
        logger.info("Students found for course %s: %d", course_id, len(students))
        return jsonify(students)
    except Exception as e:
        return error_response('Failed to fetch students', e)


@classroom_bp.route('/api/courses/<course_id>/topics')
def list_topics(course_id):
    try:
        return jsonify(courses.get_topics(get_client(), course_id))
    except Exception as e:
        return error_response('Failed to fetch topics', e)


@classroom_bp.route('/api/courses/<course_id>/announcements', methods=['POST'])
def create_announcement(course_id):
    data = request.get_json(silent=True) or {}
    text = (data.get('text') or '').strip()
    if not text:
        return jsonify({'error': 'Announcement text is required'}), 400

    try:
        created = courses.create_announcement(get_client(), course_id, text, data.get('materials'))
        return jsonify(created), 201
    except Exception as e:
        return error_response('Failed to create announcement', e)


@classroom_bp.route('/api/courses/<course_id>/teachers', methods=['POST'])
def invite_teacher(course_id):
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip()
    if not email:
        return jsonify({'error': 'Teacher email is required'}), 400

    try:
        courses.invite_teacher(get_client(), course_id, email)
        return jsonify({'status': 'invited', 'email': email})
    except Exception as e:
        return error_response('Failed to invite teacher', e)


# ══════════════════════════════════════════════════════════════
# COURSE WORK
# ══════════════════════════════════════════════════════════════

@classroom_bp.route('/api/courses/<course_id>/work')
def list_course_work(course_id):
    try:
        work = coursework.get_course_work_list(get_client(), course_id, max_workers=_workers())
        return jsonify(work)
    except Exception as e:
        return error_response('Failed to fetch course work', e)


@classroom_bp.route('/api/courses/<course_id>/calendar')
def course_calendar(course_id):
    try:
        return jsonify(coursework.get_course_calendar(get_client(), course_id, max_workers=_workers()))
    except Exception as e:
        return error_response('Failed to fetch calendar', e)


@classroom_bp.route('/api/courses/<course_id>/materials')
def course_materials(course_id):
    try:
        return jsonify(coursework.get_course_materials(get_client(), course_id))
    except Exception as e:
        return error_response('Failed to fetch materials', e)


@classroom_bp.route('/api/courses/<course_id>/coursework/<course_work_id>')
def course_work_details(course_id, course_work_id):
    try:
        return jsonify(coursework.get_course_work_details(get_client(), course_id, course_work_id))
    except Exception as e:
        return error_response('Failed to fetch course work', e)


# ══════════════════════════════════════════════════════════════
# SUBMISSIONS
# ══════════════════════════════════════════════════════════════

@classroom_bp.route('/api/courses/<course_id>/coursework/<course_work_id>/submissions')
def list_submissions(course_id, course_work_id):
    try:
        result = submissions.get_detailed_submissions(
            get_client(), course_id, course_work_id, max_workers=_workers()
        )
        logger.info("Found %d submissions", len(result))
        return jsonify(result)
    except Exception as e:
        return error_response('Failed to fetch submissions', e)


@classroom_bp.route('/api/courses/<course_id>/coursework/<course_work_id>/submissions/<submission_id>/attachments')
def submission_attachments(course_id, course_work_id, submission_id):
    try:
        attachments = submissions.get_submission_attachments(
            get_client(), course_id, course_work_id, submission_id
        )
        return jsonify(attachments)
    except Exception as e:
        return error_response('Failed to fetch attachments', e)


@classroom_bp.route('/api/courses/<course_id>/coursework/<course_work_id>/submissions/<submission_id>/grade',
                    methods=['POST'])
def grade_submission(course_id, course_work_id, submission_id):
    data = request.get_json(silent=True) or {}

    # Validate before a client is even built
    try:
        grade = submissions.parse_grade(data.get('grade'))
    except GradeValidationError:
        return jsonify({'error': 'Invalid grade provided'}), 400

    logger.info(
        "Processing grade submission course=%s work=%s submission=%s grade=%s user=%s",
        course_id, course_work_id, submission_id, grade, g.user_email,
    )

    try:
        updated = submissions.grade_submission(
            get_client(), course_id, course_work_id, submission_id,
            grade, data.get('feedback'),
        )
        return jsonify(updated)
    except Exception as e:
        return error_response('Failed to grade submission', e)
