"""
Google API Client Handle
========================
Thin wrapper over the Classroom, Drive and Docs discovery clients.

Every aggregator receives one of these explicitly; nothing here is global.
List operations return a Page(items, next_cursor) so the paged collector
can walk any of them the same way.

googleapiclient resources sit on top of httplib2, which is not thread-safe,
so each worker thread builds its own resource objects from the shared
credentials.
"""

import logging
import threading
from typing import NamedTuple, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from dashboard.config import config, GOOGLE_SCOPES, GOOGLE_TOKEN_URI

logger = logging.getLogger(__name__)


class Page(NamedTuple):
    items: list
    next_cursor: Optional[str] = None


class ClassroomClient:
    """Authenticated handle onto the Google APIs used by the dashboard."""

    def __init__(self, credentials):
        self.credentials = credentials
        self._local = threading.local()

    @classmethod
    def from_tokens(cls, access_token, refresh_token=None):
        """Build a client from OAuth tokens held in the user's session."""
        credentials = Credentials(
            token=access_token,
            refresh_token=refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=config.google_client_id,
            client_secret=config.google_client_secret,
            scopes=GOOGLE_SCOPES,
        )
        return cls(credentials)

    @classmethod
    def from_session_user(cls, user):
        return cls.from_tokens(user.get('access_token'), user.get('refresh_token'))

    def _service(self, name, version):
        services = getattr(self._local, 'services', None)
        if services is None:
            services = self._local.services = {}
        key = (name, version)
        if key not in services:
            services[key] = build(name, version, credentials=self.credentials, cache_discovery=False)
        return services[key]

    @property
    def classroom(self):
        return self._service('classroom', 'v1')

    @property
    def drive(self):
        return self._service('drive', 'v3')

    @property
    def docs(self):
        return self._service('docs', 'v1')

    # ───────────────────────────────────────────
    # Paginated lists
    # ───────────────────────────────────────────

    def list_courses(self, page_token=None, page_size=None, course_states=None):
        response = self.classroom.courses().list(
            pageToken=page_token,
            pageSize=page_size,
            courseStates=course_states,
        ).execute()
        return Page(response.get('courses', []), response.get('nextPageToken'))

    def list_students(self, course_id, page_token=None, page_size=None, fields=None):
        response = self.classroom.courses().students().list(
            courseId=course_id,
            pageToken=page_token,
            pageSize=page_size,
            fields=fields,
        ).execute()
        return Page(response.get('students', []), response.get('nextPageToken'))

    def list_course_work(self, course_id, page_token=None, page_size=None,
                         order_by=None, course_work_states=None):
        response = self.classroom.courses().courseWork().list(
            courseId=course_id,
            pageToken=page_token,
            pageSize=page_size,
            orderBy=order_by,
            courseWorkStates=course_work_states,
        ).execute()
        return Page(response.get('courseWork', []), response.get('nextPageToken'))

    def list_submissions(self, course_id, course_work_id, page_token=None,
                         page_size=None, states=None, fields=None):
        response = self.classroom.courses().courseWork().studentSubmissions().list(
            courseId=course_id,
            courseWorkId=course_work_id,
            pageToken=page_token,
            pageSize=page_size,
            states=states,
            fields=fields,
        ).execute()
        return Page(response.get('studentSubmissions', []), response.get('nextPageToken'))

    def list_topics(self, course_id, page_token=None, page_size=None):
        response = self.classroom.courses().topics().list(
            courseId=course_id,
            pageToken=page_token,
            pageSize=page_size,
        ).execute()
        return Page(response.get('topic', []), response.get('nextPageToken'))

    # ───────────────────────────────────────────
    # Point lookups
    # ───────────────────────────────────────────

    def get_course_work(self, course_id, course_work_id):
        return self.classroom.courses().courseWork().get(
            courseId=course_id,
            id=course_work_id,
        ).execute()

    def get_submission(self, course_id, course_work_id, submission_id, fields=None):
        return self.classroom.courses().courseWork().studentSubmissions().get(
            courseId=course_id,
            courseWorkId=course_work_id,
            id=submission_id,
            fields=fields,
        ).execute()

    def get_user_profile(self, user_id):
        return self.classroom.userProfiles().get(userId=user_id).execute()

    def get_file_metadata(self, file_id, fields='id,name,mimeType'):
        return self.drive.files().get(fileId=file_id, fields=fields).execute()

    def download_file(self, file_id):
        """Return the raw bytes of a Drive file."""
        return self.drive.files().get_media(fileId=file_id).execute()

    def get_document(self, document_id):
        return self.docs.documents().get(documentId=document_id).execute()

    # ───────────────────────────────────────────
    # Writes
    # ───────────────────────────────────────────

    def patch_submission_grade(self, course_id, course_work_id, submission_id, grade):
        return self.classroom.courses().courseWork().studentSubmissions().patch(
            courseId=course_id,
            courseWorkId=course_work_id,
            id=submission_id,
            updateMask='assignedGrade',
            body={'assignedGrade': grade},
        ).execute()

    def return_submission(self, course_id, course_work_id, submission_id):
        # "return" is a Python keyword; the discovery client exposes it as return_
        return self.classroom.courses().courseWork().studentSubmissions().return_(
            courseId=course_id,
            courseWorkId=course_work_id,
            id=submission_id,
            body={},
        ).execute()

    def create_announcement(self, course_id, body):
        return self.classroom.courses().announcements().create(
            courseId=course_id,
            body=body,
        ).execute()

    def create_teacher(self, course_id, user_id):
        return self.classroom.courses().teachers().create(
            courseId=course_id,
            body={'userId': user_id},
        ).execute()
