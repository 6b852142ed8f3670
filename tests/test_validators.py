"""
Test input validators
"""
import pytest
from utils.validators import validate_date, validate_time, allowed_file


@pytest.mark.parametrize('value,valid', [
    ('2024-06-10', True),
    ('2024-02-29', True),
    ('2023-02-29', False),
    ('2024-9-1', False),
    ('2024-09-1', False),
    ('24-09-01', False),
    ('2024-09-01T10:00', False),
    ('2024-09-01\n', False),
    (None, False),
    (20240901, False),
])
def test_validate_date(value, valid):
    assert validate_date(value) is valid


@pytest.mark.parametrize('value,valid', [
    ('09:05', True),
    ('23:59', True),
    ('24:00', False),
    ('9:05', False),
    ('09:5', False),
    ('09:05:00', False),
    ('', False),
])
def test_validate_time(value, valid):
    assert validate_time(value) is valid


def test_allowed_file():
    assert allowed_file('CV.PDF', {'pdf'})
    assert not allowed_file('cv', {'pdf'})
    assert not allowed_file('cv.pdf.exe', {'pdf'})
