"""
Drive file content for the document viewer.
"""

import base64
import logging

logger = logging.getLogger(__name__)

GOOGLE_DOC_MIME = 'application/vnd.google-apps.document'


def extract_document_text(document):
    """Concatenate the text runs of every paragraph in a Docs API document."""
    parts = []
    for element in (document.get('body') or {}).get('content', []):
        paragraph = element.get('paragraph')
        if not paragraph:
            continue
        for run in paragraph.get('elements', []):
            text_run = run.get('textRun')
            if text_run:
                parts.append(text_run.get('content', ''))
    return ''.join(parts)


def get_file_content(client, file_id):
    """
    Return a file's content shaped for the front end.

    Google Docs and text/* files come back as text, images as base64,
    anything else as "unsupported" with only the MIME type.
    """
    metadata = client.get_file_metadata(file_id, fields='mimeType')
    mime_type = metadata.get('mimeType', '')
    logger.info("Fetching Drive file %s (%s)", file_id, mime_type)

    if mime_type == GOOGLE_DOC_MIME:
        document = client.get_document(file_id)
        return {"type": "text", "content": extract_document_text(document), "mimeType": mime_type}

    if mime_type.startswith('text/'):
        data = client.download_file(file_id)
        return {"type": "text", "content": data.decode('utf-8', errors='replace'), "mimeType": mime_type}

    if mime_type.startswith('image/'):
        data = client.download_file(file_id)
        return {"type": "image", "content": base64.b64encode(data).decode('ascii'), "mimeType": mime_type}

    return {"type": "unsupported", "mimeType": mime_type}
