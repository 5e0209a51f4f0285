"""
Document routes: Drive file content and the writing analyzer.
"""
import logging

from flask import Blueprint, jsonify, request

from dashboard.routes.classroom_routes import error_response, get_client
from dashboard.services.drive_service import get_file_content
from dashboard.services.writing_analysis import AnalysisError, analyze_writing

document_bp = Blueprint('document', __name__)
logger = logging.getLogger(__name__)


@document_bp.route('/api/drive/files/<file_id>/content')
def file_content(file_id):
    try:
        return jsonify(get_file_content(get_client(), file_id))
    except Exception as e:
        return error_response('Failed to fetch file content', e)


@document_bp.route('/api/analyze-writing', methods=['POST'])
def analyze():
    data = request.get_json(silent=True) or {}
    text = data.get('text')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'No text provided for analysis'}), 400

    try:
        return jsonify(analyze_writing(text))
    except AnalysisError as e:
        logger.error("Error parsing AI response: %s", e)
        return jsonify({
            'error': 'Failed to parse analysis result',
            'details': str(e),
            'rawResponse': e.raw_response,
        }), 500
    except Exception as e:
        return error_response('Failed to analyze writing', e)
