import pytest

from backend.utils.phone_utils import normalize_ugandan_phone


@pytest.mark.parametrize("raw, expected", [
    ("0772123456", "256772123456"),
    ("772123456", "256772123456"),
    ("414123456", "256414123456"),
    ("256772123456", "256772123456"),
    ("+256 772-123-456", "256772123456"),
    ("(0772) 123 456", "256772123456"),
])
def test_valid_numbers(raw, expected):
    assert normalize_ugandan_phone(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "12345", "1772123456", "572123456", "255772123456", "07721234567"])
def test_invalid_numbers(raw):
    assert normalize_ugandan_phone(raw) is None
