from flask import Blueprint, request, jsonify
from models.interview import Interview
from extensions import db
from middleware.auth import require_session
from utils.request_body import json_body
from utils.validators import validate_date, validate_time
import logging

interviews_bp = Blueprint('interviews', __name__)
logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('company', 'role', 'date', 'time', 'notes')


def _validate(data, partial=False):
    """Return an error message or None"""
    if not partial or 'company' in data:
        if not (data.get('company') or '').strip():
            return 'company is required'
    if not partial or 'date' in data:
        if not data.get('date'):
            return 'date is required'
        if not validate_date(data['date']):
            return 'Invalid date format. Use YYYY-MM-DD'
    if data.get('time') and not validate_time(data['time']):
        return 'Invalid time format. Use HH:MM'
    return None


def _get_owned(interview_id):
    return Interview.query.filter_by(id=interview_id, user_id=request.current_user.id).first()


@interviews_bp.route('', methods=['POST'])
@require_session()
def add_interview():
    try:
        data = json_body()
        if data is None:
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        error = _validate(data)
        if error:
            return jsonify({'error': error}), 400

        interview = Interview(
            user_id=request.current_user.id,
            company=data['company'].strip(),
            role=data.get('role'),
            date=data['date'],
            time=data.get('time') or None,
            notes=data.get('notes')
        )
        db.session.add(interview)
        db.session.commit()

        return jsonify({
            'message': 'Interview added successfully',
            'interview': interview.to_dict()
        }), 201

    except Exception as e:
        db.session.rollback()
        logger.error(f"add interview error: {str(e)}")
        return jsonify({'error': 'Could not add interview'}), 500


@interviews_bp.route('', methods=['GET'])
@require_session()
def get_interviews():
    """Upcoming interviews ordered by date, then time"""
    interviews = Interview.query.filter_by(user_id=request.current_user.id) \
        .order_by(Interview.date.asc(), Interview.time.asc().nulls_first(), Interview.id.asc()).all()

    return jsonify({
        'interviews': [i.to_dict() for i in interviews],
        'total': len(interviews)
    }), 200


@interviews_bp.route('/<int:interview_id>', methods=['PUT'])
@require_session()
def update_interview(interview_id):
    try:
        interview = _get_owned(interview_id)
        if not interview:
            return jsonify({'error': 'Interview not found'}), 404

        data = json_body()
        if data is None:
            return jsonify({'error': 'Request body must be a JSON object'}), 400
        error = _validate(data, partial=True)
        if error:
            return jsonify({'error': error}), 400

        for field in EDITABLE_FIELDS:
            if field in data:
                setattr(interview, field, data[field] or None)
        db.session.commit()

        return jsonify({
            'message': 'Interview updated successfully',
            'interview': interview.to_dict()
        }), 200

    except Exception as e:
        db.session.rollback()
        logger.error(f"Update interview error: {str(e)}")
        return jsonify({'error': str(e)}), 500


@interviews_bp.route('/<int:interview_id>', methods=['DELETE'])
@require_session()
def delete_interview(interview_id):
    try:
        interview = _get_owned(interview_id)
        if not interview:
            return jsonify({'error': 'Interview not found'}), 404

        db.session.delete(interview)
        db.session.commit()

        return jsonify({'message': 'Interview cancelled successfully'}), 200

    except Exception as e:
        db.session.rollback()
        logger.error(f"Delete interview error: {str(e)}")
        return jsonify({'error': str(e)}), 500
