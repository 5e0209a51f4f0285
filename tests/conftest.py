"""
Shared test fixtures for the Classroom Dashboard.
An in-memory stand-in for the Google client serves scripted pages and
records every call. Zero network calls.
"""
import threading
import time

import pytest

from dashboard.app import create_app
from dashboard.services.google_client import Page


class UpstreamError(Exception):
    """Plays the part of googleapiclient's HttpError in tests."""


class FakeClassroomClient:
    """Implements the ClassroomClient surface over plain dicts."""

    def __init__(self, page_size=2):
        self.default_page_size = page_size
        self.courses = []
        self.rosters = {}        # course_id -> [student entry]
        self.course_work = {}    # course_id -> [course work]
        self.submissions = {}    # course_work_id -> [submission]
        self.profiles = {}       # user_id -> profile
        self.topics = {}         # course_id -> [topic]
        self.files = {}          # file_id -> {"mimeType": ..., "data": bytes}
        self.documents = {}      # file_id -> Docs API document
        self.failures = {}       # (method, key) -> exception
        self.delays = {}         # (method, key) -> seconds
        self.calls = []
        self._lock = threading.Lock()

    # ── scripting helpers ──

    def fail(self, method, key=None, error=None):
        self.failures[(method, key)] = error or UpstreamError(f"{method} failed for {key}")

    def delay(self, method, key, seconds):
        self.delays[(method, key)] = seconds

    def calls_to(self, method):
        return [kwargs for name, kwargs in self.calls if name == method]

    def _hit(self, method, key=None, **kwargs):
        with self._lock:
            self.calls.append((method, dict(kwargs, key=key)))
        seconds = self.delays.get((method, key))
        if seconds:
            time.sleep(seconds)
        error = self.failures.get((method, key))
        if error is not None:
            raise error

    def _page(self, items, page_token, page_size):
        size = page_size or self.default_page_size
        start = int(page_token or 0)
        end = start + size
        next_cursor = str(end) if end < len(items) else None
        return Page(list(items[start:end]), next_cursor)

    # ── lists ──

    def list_courses(self, page_token=None, page_size=None, course_states=None):
        self._hit('list_courses', page_token=page_token, course_states=course_states)
        courses = [c for c in self.courses if not course_states or c.get('courseState', 'ACTIVE') in course_states]
        return self._page(courses, page_token, page_size)

    def list_students(self, course_id, page_token=None, page_size=None, fields=None):
        self._hit('list_students', course_id, page_token=page_token, page_size=page_size, fields=fields)
        return self._page(self.rosters.get(course_id, []), page_token, page_size)

    def list_course_work(self, course_id, page_token=None, page_size=None,
                         order_by=None, course_work_states=None):
        self._hit('list_course_work', course_id, page_token=page_token,
                  order_by=order_by, course_work_states=course_work_states)
        work = [w for w in self.course_work.get(course_id, [])
                if not course_work_states or w.get('state', 'PUBLISHED') in course_work_states]
        return self._page(work, page_token, page_size)

    def list_submissions(self, course_id, course_work_id, page_token=None,
                         page_size=None, states=None, fields=None):
        self._hit('list_submissions', course_work_id, page_token=page_token, states=states, fields=fields)
        subs = [s for s in self.submissions.get(course_work_id, []) if not states or s.get('state') in states]
        return self._page(subs, page_token, page_size)

    def list_topics(self, course_id, page_token=None, page_size=None):
        self._hit('list_topics', course_id, page_token=page_token)
        return self._page(self.topics.get(course_id, []), page_token, page_size)

    # ── lookups ──

    def get_course_work(self, course_id, course_work_id):
        self._hit('get_course_work', course_work_id)
        for work in self.course_work.get(course_id, []):
            if work['id'] == course_work_id:
                return dict(work)
        raise UpstreamError(f"course work {course_work_id} not found")

    def get_submission(self, course_id, course_work_id, submission_id, fields=None):
        self._hit('get_submission', submission_id, fields=fields)
        for sub in self.submissions.get(course_work_id, []):
            if sub['id'] == submission_id:
                return dict(sub)
        raise UpstreamError(f"submission {submission_id} not found")

    def get_user_profile(self, user_id):
        self._hit('get_user_profile', user_id)
        if user_id not in self.profiles:
            raise UpstreamError(f"profile {user_id} not found")
        return self.profiles[user_id]

    def get_file_metadata(self, file_id, fields='id,name,mimeType'):
        self._hit('get_file_metadata', file_id, fields=fields)
        return {'mimeType': self.files[file_id]['mimeType']}

    def download_file(self, file_id):
        self._hit('download_file', file_id)
        return self.files[file_id]['data']

    def get_document(self, document_id):
        self._hit('get_document', document_id)
        return self.documents[document_id]

    # ── writes ──

    def _find_submission(self, course_work_id, submission_id):
        for sub in self.submissions.get(course_work_id, []):
            if sub['id'] == submission_id:
                return sub
        raise UpstreamError(f"submission {submission_id} not found")

    def patch_submission_grade(self, course_id, course_work_id, submission_id, grade):
        self._hit('patch_submission_grade', submission_id, grade=grade)
        sub = self._find_submission(course_work_id, submission_id)
        sub['assignedGrade'] = grade
        return dict(sub)

    def return_submission(self, course_id, course_work_id, submission_id):
        self._hit('return_submission', submission_id)
        sub = self._find_submission(course_work_id, submission_id)
        sub['state'] = 'RETURNED'
        return dict(sub)

    def create_announcement(self, course_id, body):
        self._hit('create_announcement', course_id, body=body)
        return dict(body, id='ann-1', courseId=course_id)

    def create_teacher(self, course_id, user_id):
        self._hit('create_teacher', course_id, user_id=user_id)
        return {'courseId': course_id, 'userId': user_id}


def roster_entry(user_id, course_id, name):
    return {
        'userId': user_id,
        'courseId': course_id,
        'profile': {
            'name': {'fullName': name},
            'emailAddress': f"{user_id}@school.test",
            'photoUrl': f"https://photos.test/{user_id}.png",
        },
    }


def profile(user_id, name):
    return roster_entry(user_id, None, name)['profile']


@pytest.fixture
def fake_client():
    """A fake client seeded with two courses, course work and submissions."""
    client = FakeClassroomClient()
    client.courses = [
        {'id': 'c1', 'name': 'Civics', 'section': 'Period 1', 'enrollmentCode': 'abc1'},
        {'id': 'c2', 'name': 'Writing', 'section': 'Period 2', 'enrollmentCode': 'abc2'},
        {'id': 'c3', 'name': 'History', 'section': 'Period 3', 'enrollmentCode': 'abc3'},
    ]
    client.rosters = {
        'c1': [roster_entry(f"s{i}", 'c1', f"Student {i}") for i in range(1, 6)],
        'c2': [roster_entry('s1', 'c2', 'Student 1')],
        'c3': [],
    }
    client.course_work = {
        'c1': [
            {'id': 'w1', 'title': 'Essay', 'workType': 'ASSIGNMENT', 'maxPoints': 100,
             'dueDate': {'year': 2026, 'month': 10, 'day': 30},
             'materials': [{'link': {'url': 'https://rubric.test'}}]},
            {'id': 'w2', 'title': 'Quiz', 'workType': 'SHORT_ANSWER_QUESTION', 'maxPoints': 10},
            {'id': 'w3', 'title': 'Reading', 'workType': 'MATERIAL', 'state': 'DRAFT'},
        ],
    }
    client.submissions = {
        'w1': [
            {'id': 'sub1', 'userId': 's1', 'state': 'NEW'},
            {'id': 'sub2', 'userId': 's2', 'state': 'TURNED_IN',
             'assignmentSubmission': {'attachments': [{'driveFile': {'id': 'f1', 'title': 'essay.docx'}}]}},
            {'id': 'sub3', 'userId': 's3', 'state': 'RETURNED', 'assignedGrade': 88},
            {'id': 'sub4', 'userId': 's4', 'state': 'NEW'},
        ],
        'w2': [
            {'id': 'sub5', 'userId': 's1', 'state': 'CREATED'},
        ],
    }
    client.profiles = {f"s{i}": profile(f"s{i}", f"Student {i}") for i in range(1, 6)}
    return client


@pytest.fixture
def app(fake_client):
    return create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'CLASSROOM_CLIENT_FACTORY': lambda user: fake_client,
        'MAX_FANOUT_WORKERS': 4,
    })


@pytest.fixture
def client(app):
    """Unauthenticated Flask test client."""
    return app.test_client()


@pytest.fixture
def auth_client(app):
    """Flask test client with a signed-in teacher in the session."""
    test_client = app.test_client()
    with test_client.session_transaction() as sess:
        sess['user'] = {
            'id': 'teacher-1',
            'email': 'teacher@school.test',
            'name': 'Ms. Test Teacher',
            'access_token': 'access-token',
            'refresh_token': 'refresh-token',
        }
    return test_client
