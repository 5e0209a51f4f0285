"""
Submission aggregation and grading.

Detailed submissions are stitched with the author's profile. Grading is a
two-step command (patch the grade, then return the submission) with no
rollback: if the return fails after the grade was written, the submission
stays graded but not returned and the error goes back to the caller.
"""

import logging
from functools import partial

from dashboard.services.fanout import fan_out
from dashboard.services.pagination import collect_pages

logger = logging.getLogger(__name__)

DETAIL_STATES = ['TURNED_IN', 'RETURNED', 'NEW', 'CREATED']

# Fields copied from the raw submission onto the enriched record
SUBMISSION_FIELDS = (
    'id',
    'userId',
    'state',
    'late',
    'assignedGrade',
    'alternateLink',
    'creationTime',
    'updateTime',
    'assignmentSubmission',
    'shortAnswerSubmission',
    'multipleChoiceSubmission',
)


class GradeValidationError(ValueError):
    """Raised when a grade is missing or not an integer."""


def parse_grade(value):
    """Return ``value`` as an int, or raise GradeValidationError."""
    if value is None or isinstance(value, bool):
        raise GradeValidationError("Invalid grade provided")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise GradeValidationError(f"Grade must be a whole number, got {value}")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise GradeValidationError(f"Grade must be a whole number, got {value!r}") from None
    raise GradeValidationError("Invalid grade provided")


def _with_student(submission, profile):
    record = {field: submission.get(field) for field in SUBMISSION_FIELDS}
    record['student'] = {
        'name': (profile.get('name') or {}).get('fullName'),
        'email': profile.get('emailAddress'),
        'photoUrl': profile.get('photoUrl'),
    }
    return record


def get_detailed_submissions(client, course_id, course_work_id, max_workers=None):
    """
    All submissions for a course work item, each with a ``student`` record.

    Profiles are looked up concurrently. When a lookup fails the raw
    submission is returned as-is, so ``student`` is optional for callers.
    """
    logger.info("Fetching submissions for course=%s work=%s", course_id, course_work_id)
    fetch = partial(client.list_submissions, course_id, course_work_id, states=DETAIL_STATES)
    submissions = collect_pages(fetch)

    if not submissions:
        logger.info("No submissions found for work %s", course_work_id)
        return []

    def enrich(submission):
        profile = client.get_user_profile(submission['userId'])
        return _with_student(submission, profile)

    def raw_submission(submission, error):
        logger.warning("Error fetching student details for %s: %s", submission.get('userId'), error)
        return submission

    return fan_out(enrich, submissions, max_workers=max_workers, fallback=raw_submission)


def get_submission_attachments(client, course_id, course_work_id, submission_id):
    submission = client.get_submission(
        course_id, course_work_id, submission_id,
        fields='assignmentSubmission',
    )
    return (submission.get('assignmentSubmission') or {}).get('attachments', [])


def grade_submission(client, course_id, course_work_id, submission_id, grade, feedback=None):
    """
    Assign a grade and return the submission to the student.

    The grade is validated before anything is sent upstream. ``feedback`` is
    only logged; Classroom has no API field for it.
    """
    grade = parse_grade(grade)

    logger.info(
        "Grading submission course=%s work=%s submission=%s grade=%s",
        course_id, course_work_id, submission_id, grade,
    )
    if feedback:
        logger.info("Feedback for submission %s: %s", submission_id, feedback)

    current = client.get_submission(course_id, course_work_id, submission_id)
    logger.info(
        "Current submission state=%s grade=%s",
        current.get('state'), current.get('assignedGrade'),
    )

    updated = client.patch_submission_grade(course_id, course_work_id, submission_id, grade)
    logger.info("Grade updated: %s", updated.get('assignedGrade'))

    try:
        returned = client.return_submission(course_id, course_work_id, submission_id)
    except Exception:
        logger.error(
            "Submission %s was graded but could not be returned; it is left graded and not returned",
            submission_id,
        )
        raise

    logger.info("Submission %s returned", submission_id)
    return returned
