"""
Application tracker

Each tracked job moves through saved -> applied -> interview -> offer/rejected.
Every status change is appended to the entry's stage history, so the
history is an append-only log of {status, timestamp} pairs.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional
from extensions import db
from models.application import Application, PendingApplication
from utils.field_mapping import get_field

STATUS_OPTIONS = [
    {'value': 'saved', 'label': 'Saved'},
    {'value': 'applied', 'label': 'Applied'},
    {'value': 'interview', 'label': 'Interview'},
    {'value': 'offer', 'label': 'Offer'},
    {'value': 'rejected', 'label': 'Rejected'},
]
STATUS_VALUES = [option['value'] for option in STATUS_OPTIONS]

# Request key -> Application column for fields a user may edit
EDITABLE_FIELDS = {
    'status': 'status',
    'nextStepDate': 'next_step_date',
    'next_step_date': 'next_step_date',
    'notes': 'notes',
    'title': 'title',
    'company': 'company',
    'location': 'location',
    'link': 'link',
    'salary': 'salary',
    'type': 'job_type',
    'job_type': 'job_type',
    'description': 'description',
}


class TrackerError(ValueError):
    """Raised for invalid tracker input"""


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def validate_status(status: str) -> str:
    if status not in STATUS_VALUES:
        raise TrackerError(f"Invalid status '{status}'. Use one of: {', '.join(STATUS_VALUES)}")
    return status


def normalize_entry(item: Dict, now: Optional[str] = None) -> Dict:
    """Fill in defaults for a tracked job coming from any client or import"""
    logged_at = get_field(item, 'loggedAt', 'logged_at', 'queuedAt', 'queued_at') or now or utc_now_iso()
    status = item.get('status') or 'applied'
    history = get_field(item, 'stageHistory', 'stage_history')
    if not isinstance(history, list) or not history:
        history = [{'status': status, 'timestamp': logged_at}]

    return {
        'id': item.get('id'),
        'title': item.get('title') or 'Untitled role',
        'company': item.get('company') or 'Unknown company',
        'location': item.get('location') or '',
        'link': item.get('link') or '',
        'salary': item.get('salary') or '',
        'type': get_field(item, 'type', 'job_type') or '',
        'description': item.get('description') or '',
        'status': status,
        'loggedAt': logged_at,
        'nextStepDate': get_field(item, 'nextStepDate', 'next_step_date') or '',
        'notes': item.get('notes') or '',
        'stageHistory': history
    }


def _build_application(user_id: int, entry: Dict) -> Application:
    return Application(
        user_id=user_id,
        title=entry['title'],
        company=entry['company'],
        location=entry['location'],
        link=entry['link'],
        salary=entry['salary'],
        job_type=entry['type'],
        description=entry['description'],
        status=entry['status'],
        logged_at=entry['loggedAt'],
        next_step_date=entry['nextStepDate'],
        notes=entry['notes'],
        stage_history=entry['stageHistory']
    )


def add_application(user_id: int, job: Dict, status: str = 'saved') -> Application:
    """Log a job under ``status``, recording the transition in its history"""
    validate_status(status)
    now = utc_now_iso()
    previous = get_field(job, 'stageHistory', 'stage_history') or []
    entry = normalize_entry({
        **job,
        'status': status,
        'stageHistory': [*previous, {'status': status, 'timestamp': now}]
    }, now=now)

    application = _build_application(user_id, entry)
    db.session.add(application)
    db.session.commit()
    return application


def import_entries(user_id: int, entries: List[Dict]) -> List[Application]:
    """Store entries exported from the browser tracker (newest first)"""
    imported = []
    # Insert oldest first so id order matches the exported order
    for item in reversed(entries):
        if not isinstance(item, dict):
            continue
        if item.get('status') not in STATUS_VALUES:
            item = {**item, 'status': 'applied'}
        entry = normalize_entry(item)
        application = _build_application(user_id, entry)
        db.session.add(application)
        imported.append(application)
    db.session.commit()
    imported.reverse()
    return imported


def list_applications(user_id: int, status: Optional[str] = None) -> List[Application]:
    query = Application.query.filter_by(user_id=user_id)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Application.id.desc()).all()


def update_application(application: Application, field: str, value) -> Application:
    """Set one field; a status change appends to the stage history"""
    column = EDITABLE_FIELDS.get(field)
    if not column:
        raise TrackerError(f"Field '{field}' cannot be edited")

    if column == 'status':
        validate_status(value)
        application.stage_history = [
            *(application.stage_history or []),
            {'status': value, 'timestamp': utc_now_iso()}
        ]
    elif column in ('title', 'company') and not value:
        raise TrackerError(f"{column.capitalize()} cannot be empty")

    setattr(application, column, value if value is not None else '')
    return application


def update_fields(application: Application, data: Dict) -> Application:
    for field, value in data.items():
        update_application(application, field, value)
    db.session.commit()
    return application


def remove_application(application: Application):
    db.session.delete(application)
    db.session.commit()


def compute_stats(applications) -> Dict[str, int]:
    """Count applications per status"""
    totals = {'total': 0}
    totals.update({value: 0 for value in STATUS_VALUES})
    for application in applications:
        status = application.status if isinstance(application, Application) else application.get('status')
        totals['total'] += 1
        totals[status] = totals.get(status, 0) + 1
    return totals


def queue_pending(user_id: int, job: Dict) -> PendingApplication:
    pending = PendingApplication(
        user_id=user_id,
        title=job.get('title') or 'Untitled role',
        company=job.get('company') or 'Unknown company',
        location=job.get('location') or '',
        link=job.get('link') or '',
        salary=job.get('salary') or '',
        job_type=get_field(job, 'type', 'job_type') or '',
        description=job.get('description') or '',
        queued_at=get_field(job, 'queuedAt', 'queued_at') or utc_now_iso()
    )
    db.session.add(pending)
    db.session.commit()
    return pending


def list_pending(user_id: int) -> List[PendingApplication]:
    return PendingApplication.query.filter_by(user_id=user_id).order_by(PendingApplication.id.asc()).all()


def convert_pending(pending: PendingApplication) -> Application:
    """Log a queued job as applied and drop it from the queue"""
    job = pending.to_job()
    job.pop('queuedAt', None)
    user_id = pending.user_id
    db.session.delete(pending)
    return add_application(user_id, job, status='applied')


def dismiss_pending(pending: PendingApplication):
    db.session.delete(pending)
    db.session.commit()
