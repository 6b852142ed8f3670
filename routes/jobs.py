from flask import Blueprint, request, jsonify, current_app
from middleware.auth import require_session
from services.job_feed import fetch_jobs, JobFeedError
from utils.job_cards import render_job_cards

jobs_bp = Blueprint('jobs', __name__)

MAX_LIMIT = 100

JOB_SUGGESTIONS = [
    {'title': 'Junior Software Developer', 'company': 'TechNova', 'location': 'Remote'},
    {'title': 'Backend Engineer Intern', 'company': 'CloudCore', 'location': 'Atlanta, GA'},
    {'title': 'Full-Stack Developer', 'company': 'Pathway Labs', 'location': 'Hybrid'},
    {'title': 'Front-End React Developer', 'company': 'UIWorks', 'location': 'Remote'},
    {'title': 'Cybersecurity Analyst Intern', 'company': 'SecureNet', 'location': 'On-site'},
]


@jobs_bp.route('', methods=['GET'])
def get_jobs():
    """Remote job listings as job cards"""
    search = (request.args.get('search') or '').strip() or None
    category = (request.args.get('category') or '').strip() or None
    limit = request.args.get('limit', 20, type=int)
    limit = max(1, min(limit, MAX_LIMIT))

    try:
        jobs = fetch_jobs(
            current_app.config['JOBS_FEED_URL'],
            search=search,
            category=category,
            limit=limit,
            timeout=current_app.config['HTTP_TIMEOUT'],
            cache_ttl=current_app.config['CACHE_TTL']
        )
    except JobFeedError as e:
        return jsonify({'error': str(e)}), 502

    body = {'jobs': jobs, 'total': len(jobs)}
    if request.args.get('format') == 'html':
        body['html'] = render_job_cards(jobs)
    return jsonify(body), 200


@jobs_bp.route('/suggestions', methods=['GET'])
@require_session()
def job_suggestions():
    return jsonify({'suggestions': JOB_SUGGESTIONS}), 200
