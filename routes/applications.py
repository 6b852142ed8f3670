from flask import Blueprint, request, jsonify
from models.application import Application, PendingApplication
from extensions import db
from middleware.auth import require_session
from utils.request_body import json_body
from services import tracker
from services.tracker import TrackerError
import logging

applications_bp = Blueprint('applications', __name__)
logger = logging.getLogger(__name__)


def _get_owned(application_id):
    return Application.query.filter_by(id=application_id, user_id=request.current_user.id).first()


def _get_owned_pending(pending_id):
    return PendingApplication.query.filter_by(id=pending_id, user_id=request.current_user.id).first()


@applications_bp.route('', methods=['GET'])
@require_session()
def list_applications():
    status = request.args.get('status')
    if status and status not in tracker.STATUS_VALUES:
        return jsonify({'error': f"Invalid status '{status}'"}), 400

    applications = tracker.list_applications(request.current_user.id, status)
    return jsonify({
        'applications': [a.to_dict() for a in applications],
        'statusOptions': tracker.STATUS_OPTIONS
    }), 200


@applications_bp.route('', methods=['POST'])
@require_session()
def add_application():
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    if not (data.get('title') or '').strip():
        return jsonify({'error': 'Title is required.'}), 400

    job = {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}
    status = job.pop('status', None) or 'saved'
    try:
        application = tracker.add_application(request.current_user.id, job, status)
    except TrackerError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'message': 'Added to tracker.',
        'application': application.to_dict()
    }), 201


@applications_bp.route('/import', methods=['POST'])
@require_session()
def import_applications():
    """Bring over entries saved by the browser-only tracker"""
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    entries = data.get('entries', [])
    pending = data.get('pending', [])
    if not isinstance(entries, list) or not isinstance(pending, list):
        return jsonify({'error': 'entries and pending must be lists'}), 400

    try:
        imported = tracker.import_entries(request.current_user.id, entries)
        queued = [tracker.queue_pending(request.current_user.id, job) for job in pending if isinstance(job, dict)]
    except Exception as e:
        db.session.rollback()
        logger.error(f"Tracker import error: {str(e)}")
        return jsonify({'error': 'Import failed'}), 500

    return jsonify({
        'message': 'Tracker imported',
        'imported': len(imported),
        'pending': len(queued)
    }), 201


@applications_bp.route('/stats', methods=['GET'])
@require_session()
def application_stats():
    applications = tracker.list_applications(request.current_user.id)
    return jsonify({'stats': tracker.compute_stats(applications)}), 200


@applications_bp.route('/<int:application_id>', methods=['GET'])
@require_session()
def get_application(application_id):
    application = _get_owned(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404
    return jsonify({'application': application.to_dict()}), 200


@applications_bp.route('/<int:application_id>', methods=['PATCH', 'PUT'])
@require_session()
def update_application(application_id):
    application = _get_owned(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    if not data:
        return jsonify({'error': 'No fields to update'}), 400

    try:
        tracker.update_fields(application, data)
    except TrackerError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'message': 'Application updated',
        'application': application.to_dict()
    }), 200


@applications_bp.route('/<int:application_id>', methods=['DELETE'])
@require_session()
def delete_application(application_id):
    application = _get_owned(application_id)
    if not application:
        return jsonify({'error': 'Application not found'}), 404

    tracker.remove_application(application)
    return jsonify({'message': 'Application removed'}), 200


@applications_bp.route('/pending', methods=['GET'])
@require_session()
def list_pending():
    queue = tracker.list_pending(request.current_user.id)
    return jsonify({'pending': [p.to_dict() for p in queue]}), 200


@applications_bp.route('/pending', methods=['POST'])
@require_session()
def queue_pending():
    data = json_body()
    if data is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    if not (data.get('title') or '').strip():
        return jsonify({'error': 'Title is required.'}), 400

    pending = tracker.queue_pending(request.current_user.id, data)
    return jsonify({'message': 'Queued for logging', 'pending': pending.to_dict()}), 201


@applications_bp.route('/pending/<int:pending_id>/convert', methods=['POST'])
@require_session()
def convert_pending(pending_id):
    pending = _get_owned_pending(pending_id)
    if not pending:
        return jsonify({'error': 'Pending application not found'}), 404

    application = tracker.convert_pending(pending)
    return jsonify({
        'message': 'Logged as applied',
        'application': application.to_dict()
    }), 201


@applications_bp.route('/pending/<int:pending_id>', methods=['DELETE'])
@require_session()
def dismiss_pending(pending_id):
    pending = _get_owned_pending(pending_id)
    if not pending:
        return jsonify({'error': 'Pending application not found'}), 404

    tracker.dismiss_pending(pending)
    return jsonify({'message': 'Dismissed'}), 200
