import re

BULLET_PREFIX = re.compile(r'^[-•]+\s*')
EMPTY_PLACEHOLDER = '—'


def format_resume_text(text: str) -> str:
    """Tidy pasted resume text under a summary header.

    Lines are trimmed, blank lines dropped, and lines starting with ``-`` or
    ``•`` are rewritten as ``- item`` bullets.
    """
    lines = [line.strip() for line in text.split('\n')]
    formatted = []
    for line in lines:
        if not line:
            continue
        if line.startswith('-') or line.startswith('•'):
            line = '- ' + BULLET_PREFIX.sub('', line)
        formatted.append(line)
    return 'Professional Summary:\n' + '\n'.join(formatted)


def normalize_resume_text(value) -> str:
    """Render an AI-tailored resume (string, list or section dict) as plain text"""
    if not value:
        return EMPTY_PLACEHOLDER
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return '\n'.join(str(item) for item in value)
    if isinstance(value, dict):
        sections = []
        for section, content in value.items():
            if isinstance(content, list):
                body = '- ' + '\n- '.join(str(item) for item in content)
            elif isinstance(content, dict):
                body = normalize_resume_text(content)
            else:
                body = str(content)
            sections.append(f"{section}:\n{body}")
        return '\n\n'.join(sections)
    return str(value)
