"""
Field mapping between the user record shapes we accept.

User data reaches us as snake_case database rows, camelCase request bodies,
lowercase legacy exports and nested Mongo-style documents
(``address.city``, ``education.college``). Everything is normalized into
one camelCase profile shape before it leaves the API.
"""
from typing import Any, Dict, Optional

# Canonical profile key -> accepted source keys, in priority order
USER_FIELD_ALIASES = {
    'firstName': ('first_name', 'firstName', 'firstname'),
    'lastName': ('last_name', 'lastName', 'lastname'),
    'fullName': ('full_name', 'fullName', 'fullname', 'name'),
    'birthday': ('birthday', 'birthdate', 'dob'),
    'occupation': ('occupation',),
    'street': ('street',),
    'city': ('city',),
    'state': ('state',),
    'zip': ('zip', 'postal_code'),
    'college': ('college',),
    'certificate': ('certificate', 'degree'),
    'gradDate': ('grad_date', 'gradDate', 'graduationDate'),
    'profilePicPath': ('profile_pic_path', 'profilePicPath', 'profile_pic'),
}

# Canonical profile key -> User column
PROFILE_COLUMNS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'fullName': 'full_name',
    'birthday': 'birthday',
    'occupation': 'occupation',
    'street': 'street',
    'city': 'city',
    'state': 'state',
    'zip': 'zip',
    'college': 'college',
    'certificate': 'certificate',
    'gradDate': 'grad_date',
    'profilePicPath': 'profile_pic_path',
}

NESTED_SECTIONS = ('address', 'education')


def get_field(obj: Optional[Dict[str, Any]], *names: str) -> Any:
    """Return the first non-None value stored under any of ``names``."""
    if not obj:
        return None
    for name in names:
        value = obj.get(name)
        if value is not None:
            return value
    return None


def flatten_record(record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Lift nested address/education sub-documents to the top level.

    Top-level keys win over nested ones.
    """
    if not record:
        return {}
    flat = {}
    for section in NESTED_SECTIONS:
        nested = record.get(section)
        if isinstance(nested, dict):
            flat.update(nested)
    flat.update({k: v for k, v in record.items() if k not in NESTED_SECTIONS or not isinstance(v, dict)})
    return flat


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def map_db_user(row: Optional[Dict[str, Any]], fallback: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Normalize a user row into the camelCase profile returned by the API.

    Values from ``row`` win; missing ones come from ``fallback`` (a profile
    previously handed to the client), then ``None``.
    """
    source = flatten_record(row)
    fallback = fallback or {}

    profile = {
        'id': get_field(source, 'id', 'uniqueId', '_id') or fallback.get('id'),
        'email': get_field(source, 'email') or fallback.get('email'),
    }

    for key, aliases in USER_FIELD_ALIASES.items():
        if key == 'fullName':
            continue
        profile[key] = _blank_to_none(get_field(source, *aliases)) or fallback.get(key)

    derived_name = f"{profile['firstName'] or ''} {profile['lastName'] or ''}".strip()
    profile['fullName'] = (
        _blank_to_none(get_field(source, *USER_FIELD_ALIASES['fullName']))
        or derived_name
        or fallback.get('fullName')
        or profile['email']
    )
    return profile


def to_db_columns(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Map a request body or legacy record to User column values.

    Only keys present in the payload (under any alias) are returned, so the
    result can drive partial updates. Empty strings become ``None``.
    """
    source = flatten_record(payload)
    columns = {}
    for key, aliases in USER_FIELD_ALIASES.items():
        if any(alias in source for alias in aliases):
            columns[PROFILE_COLUMNS[key]] = _blank_to_none(get_field(source, *aliases))
    return columns
