"""
Import users exported from the older backends.

Records may be Supabase/Postgres rows (snake_case), flat JSON file entries
(camelCase) or MongoDB documents with nested address/education sections.
Existing bcrypt or werkzeug password hashes are carried over unchanged;
accounts without a usable hash get a random password and must reset it.
"""
import logging
import secrets
from typing import Dict, Iterable

from extensions import db
from models.user import User, BCRYPT_PREFIXES, WERKZEUG_PREFIXES
from utils.field_mapping import flatten_record, get_field, to_db_columns
from utils.validators import validate_email

logger = logging.getLogger(__name__)

DATE_COLUMNS = ('birthday', 'grad_date')


def _date_only(value):
    """'2001-04-03T00:00:00.000Z' -> '2001-04-03'"""
    if isinstance(value, str) and len(value) > 10 and value[4] == '-' and value[7] == '-':
        return value[:10]
    return value


def import_users(records: Iterable[Dict]) -> Dict[str, int]:
    imported = 0
    skipped = 0
    seen = set()

    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue

        flat = flatten_record(record)
        email = (get_field(flat, 'email') or '').strip().lower()
        if not validate_email(email) or email in seen:
            skipped += 1
            continue
        if User.query.filter_by(email=email).first():
            logger.info(f"Skipping {email}: already registered")
            skipped += 1
            continue

        columns = to_db_columns(record)
        for column in DATE_COLUMNS:
            if column in columns:
                columns[column] = _date_only(columns[column])

        user = User(email=email, **columns)
        if not user.full_name:
            user.refresh_full_name()

        stored_hash = get_field(flat, 'password_hash', 'passwordHash', 'password')
        if isinstance(stored_hash, str) and stored_hash.startswith(BCRYPT_PREFIXES + WERKZEUG_PREFIXES):
            user.password_hash = stored_hash
        else:
            user.set_password(secrets.token_urlsafe(32))

        db.session.add(user)
        seen.add(email)
        imported += 1

    db.session.commit()
    logger.info(f"User import finished: {imported} imported, {skipped} skipped")
    return {'imported': imported, 'skipped': skipped}
