import pytest

from jagacuan.errors import ValidationError
from jagacuan.validation import (
    parse_amount,
    parse_choice,
    parse_day,
    parse_int,
    parse_timestamp,
    parse_year,
    require_text,
    validate_email,
)


@pytest.mark.parametrize("value", [0, -5, "0", "abc", None, "", True, float("nan"), float("inf")])
def test_parse_amount_rejects_non_positive_and_garbage(value):
    with pytest.raises(ValidationError):
        parse_amount(value)


def test_parse_amount_accepts_strings_and_numbers():
    assert parse_amount("15000") == 15000.0
    assert parse_amount(2500.5) == 2500.5


def test_parse_amount_allow_zero():
    assert parse_amount(0, allow_zero=True) == 0.0
    with pytest.raises(ValidationError) as exc:
        parse_amount(-1, "spent", allow_zero=True)
    assert exc.value.field == "spent"


def test_parse_choice_is_case_insensitive_and_canonical():
    assert parse_choice("monthly", "period", ("Weekly", "Monthly")) == "Monthly"
    assert parse_choice("expense", "type", ("income", "spending"), aliases={"expense": "spending"}) == "spending"
    with pytest.raises(ValidationError):
        parse_choice("transfer", "type", ("income", "spending"))


def test_parse_timestamp_accepts_iso_strings():
    ts = parse_timestamp("2025-03-01T10:00:00Z")
    assert ts == 1740823200
    assert parse_timestamp(1700000000) == 1700000000
    assert isinstance(parse_timestamp(None), int)
    with pytest.raises(ValidationError):
        parse_timestamp("kemarin")


@pytest.mark.parametrize("value", [10 ** 15, -10 ** 15, float("nan"), float("inf"), "10000-01-01", 0.5 * 10 ** 20])
def test_parse_timestamp_rejects_out_of_range(value):
    with pytest.raises(ValidationError) as excinfo:
        parse_timestamp(value)
    assert excinfo.value.field == "date"


def test_parse_int_bounds():
    assert parse_int("12", "month", minimum=1, maximum=12) == 12
    with pytest.raises(ValidationError):
        parse_int("13", "month", minimum=1, maximum=12)
    assert parse_year("2025") == 2025
    with pytest.raises(ValidationError):
        parse_year("10000")
    with pytest.raises(ValidationError):
        parse_year("1969")


def test_parse_day_normalises():
    assert parse_day("2025-12-31", "deadline") == "2025-12-31"
    assert parse_day("2025-12-31T08:00:00", "deadline") == "2025-12-31"
    assert parse_day("", "deadline") is None


def test_require_text_strips_and_limits():
    assert require_text({"name": "  Makan  "}, "name") == "Makan"
    with pytest.raises(ValidationError):
        require_text({"name": "   "}, "name")
    with pytest.raises(ValidationError):
        require_text({"name": "x" * 51}, "name", max_length=50)


def test_validate_email():
    assert validate_email(" Budi@Example.COM ") == "budi@example.com"
    with pytest.raises(ValidationError):
        validate_email("budi@")
