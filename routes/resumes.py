from flask import Blueprint, request, jsonify, current_app, send_from_directory, abort
from werkzeug.utils import secure_filename
from models.resume import ResumeFile
from extensions import db
from middleware.auth import require_session
from utils.request_body import json_body
from services.resume_parser import ResumeParser, ResumeParseError
from services.resume_storage import get_resume_storage, LocalResumeStorage, StorageError
from services.resume_formatter import format_resume_text, normalize_resume_text
from services.resume_ai import ResumeAI
from utils.validators import allowed_file
import time
import logging

resumes_bp = Blueprint('resumes', __name__)
resume_files_bp = Blueprint('resume_files', __name__)
logger = logging.getLogger(__name__)


def _stored_filename(original_name):
    """'<ms timestamp>-<name>' with whitespace collapsed to underscores"""
    name = '_'.join(original_name.split())
    return f"{int(time.time() * 1000)}-{secure_filename(name) or 'resume'}"


def _get_upload(field='resume'):
    """Return (file, error_response)"""
    file = request.files.get(field)
    if not file or not file.filename:
        return None, (jsonify({'error': 'No file uploaded'}), 400)
    if not allowed_file(file.filename, current_app.config['ALLOWED_RESUME_EXTENSIONS']):
        return None, (jsonify({'error': 'File type not allowed. Upload a PDF, Word or text document'}), 400)
    return file, None


@resumes_bp.route('/upload', methods=['POST'])
@require_session()
def upload_resume():
    """Store a resume file and record its metadata"""
    file, error = _get_upload()
    if error:
        return error

    user = request.current_user
    try:
        data = file.read()
        filename = _stored_filename(file.filename)
        storage_path = f"user-{user.id}/{filename}"

        storage = get_resume_storage()
        url = storage.upload(storage_path, data, file.mimetype or 'application/octet-stream')

        resume = ResumeFile(
            user_id=user.id,
            filename=filename,
            original_name=file.filename,
            storage_path=storage_path,
            url=url,
            content_type=file.mimetype,
            size_bytes=len(data)
        )
        db.session.add(resume)
        db.session.commit()

        logger.info(f"Resume {resume.id} uploaded for user {user.id} ({storage.name})")
        return jsonify({
            'message': 'Resume uploaded successfully',
            'resume': resume.to_dict()
        }), 201

    except StorageError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 502
    except Exception as e:
        db.session.rollback()
        logger.error(f"uploadResume error: {str(e)}")
        return jsonify({'error': 'Server error'}), 500


@resumes_bp.route('', methods=['GET'])
@require_session()
def list_resumes():
    resumes = ResumeFile.query.filter_by(user_id=request.current_user.id) \
        .order_by(ResumeFile.created_at.desc(), ResumeFile.id.desc()).all()
    return jsonify({'resumes': [r.to_dict() for r in resumes]}), 200


@resumes_bp.route('/<int:resume_id>', methods=['DELETE'])
@require_session()
def delete_resume(resume_id):
    try:
        resume = ResumeFile.query.filter_by(id=resume_id, user_id=request.current_user.id).first()
        if not resume:
            return jsonify({'error': 'Resume not found'}), 404

        get_resume_storage().remove(resume.storage_path)
        db.session.delete(resume)
        db.session.commit()

        return jsonify({'message': 'Resume deleted successfully'}), 200

    except StorageError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 502
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 500


@resumes_bp.route('/analyze', methods=['POST'])
@require_session()
def analyze_resume():
    """Extract text, skills and contact details from an uploaded resume"""
    file, error = _get_upload()
    if error:
        return error

    try:
        parsed = ResumeParser().parse(file.read(), file.filename)
    except ResumeParseError as e:
        return jsonify({'error': str(e)}), 422

    return jsonify({
        'message': f"Resume analyzed: {len(parsed['skills'])} skills found",
        'resumeText': parsed['text'],
        'skills': parsed['skills'],
        'email': parsed['email'],
        'phone': parsed['phone'],
        'experienceYears': parsed['experience_years'],
        'educationLevel': parsed['education_level']
    }), 200


@resumes_bp.route('/format', methods=['POST'])
@require_session()
def format_resume():
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    text = data.get('text') or ''
    if not text.strip():
        return jsonify({'error': 'No resume text provided'}), 400

    return jsonify({'formattedText': format_resume_text(text)}), 200


@resumes_bp.route('/reformat', methods=['POST'])
@require_session()
def reformat_resume():
    """Tailor resume text to a job description"""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    resume_text = (data.get('resumeText') or '').strip()
    job_description = (data.get('jobDescription') or '').strip()

    if not resume_text or not job_description:
        return jsonify({'error': 'Please provide both resume text and job description.'}), 400

    try:
        result = ResumeAI(current_app.config).tailor_resume(resume_text, job_description)
    except Exception as e:
        logger.error(f"Resume reformatter failed: {str(e)}")
        return jsonify({'error': 'Failed to tailor resume.'}), 500

    result['tailoredResumeText'] = normalize_resume_text(result['tailoredResume'])
    return jsonify(result), 200


@resume_files_bp.route('/files/resumes/<path:storage_path>', methods=['GET'])
def serve_resume_file(storage_path):
    """Public URLs for resumes kept on local disk"""
    storage = get_resume_storage()
    if not isinstance(storage, LocalResumeStorage):
        abort(404)
    return send_from_directory(storage.root, storage_path)
