"""Tests for validators and filters."""

import pytest
from dateutil.relativedelta import relativedelta


def test_date_step_days():
    """Test a daily step from the epoch accepts any date."""
    from html_formgen.validators import DateStep

    validator = DateStep(base_value="1970-01-01", step=relativedelta(days=1))
    assert validator.is_valid("2013-12-25")


@pytest.mark.parametrize("value,expected", [
    ("2014-01-08", True),
    ("2014-01-15", True),
    ("2013-12-25", True),
    ("2014-01-09", False),
])
def test_date_step_weeks(value, expected):
    """Test weekly steps, including dates before the base value."""
    from html_formgen.validators import DateStep

    validator = DateStep(base_value="2014-01-01", step=relativedelta(weeks=1))
    assert validator.is_valid(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("2014-03", True),
    ("2015-01", True),
    ("2014-04", False),
])
def test_date_step_months(value, expected):
    """Test calendar month steps."""
    from html_formgen.validators import DateStep

    validator = DateStep(format="%Y-%m", base_value="2014-01", step=relativedelta(months=2))
    assert validator.is_valid(value) is expected


def test_date_step_years():
    """Test yearly steps only match the same day of the year."""
    from html_formgen.validators import DateStep

    validator = DateStep(base_value="2014-01-01", step=relativedelta(years=1))
    assert validator.is_valid("2016-01-01")
    assert not validator.is_valid("2016-02-01")


def test_date_step_seconds():
    """Test second-based steps on datetime strings."""
    from html_formgen.validators import DateStep

    validator = DateStep(format="%Y-%m-%dT%H:%M:%S", base_value="1970-01-01T00:00:00",
                         step=relativedelta(seconds=30))
    assert validator.is_valid("2014-08-12T13:45:30")
    assert not validator.is_valid("2014-08-12T13:45:31")


def test_date_step_accepts_iso_duration_and_date_objects():
    """Test steps given as ISO durations and values given as dates."""
    from datetime import date
    from html_formgen.validators import DateStep

    validator = DateStep(base_value="2014-01-01", step="P2D")
    assert validator.get_step() == relativedelta(days=2)
    assert validator.is_valid(date(2014, 1, 5))
    assert not validator.is_valid(date(2014, 1, 4))


def test_date_step_false_format():
    """Test values not matching the format fail with false_format."""
    from html_formgen.validators import DateStep

    validator = DateStep()
    assert not validator.is_valid("25/12/2013")
    assert "false_format" in validator.get_messages()


def test_date_step_rejects_zero_step():
    """Test a zero step is refused."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.validators import DateStep

    with pytest.raises(InvalidArgumentError):
        DateStep(step=relativedelta())


def test_parse_duration():
    """Test ISO 8601 duration parsing."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.validators import parse_duration

    assert parse_duration("P1D") == relativedelta(days=1)
    assert parse_duration("P1Y2M") == relativedelta(years=1, months=2)
    assert parse_duration("PT60S") == relativedelta(seconds=60)
    with pytest.raises(InvalidArgumentError):
        parse_duration("1D")
    with pytest.raises(InvalidArgumentError):
        parse_duration("P")


def test_date_validator():
    """Test the Date validator checks the format."""
    from html_formgen.validators import Date

    assert Date().is_valid("2013-12-25")
    assert Date(format="%d-%m-%Y").is_valid("25-12-2013")
    validator = Date()
    assert not validator.is_valid("2013-02-30")
    assert "false_format" in validator.get_messages()
    assert not validator.is_valid(20131225)
    assert "invalid" in validator.get_messages()


def test_greater_than_and_less_than():
    """Test exclusive and inclusive bounds."""
    from html_formgen.validators import GreaterThan, LessThan

    assert GreaterThan(min=5).is_valid(6)
    assert not GreaterThan(min=5).is_valid(5)
    assert GreaterThan(min=5, inclusive=True).is_valid("5")
    assert LessThan(max=10).is_valid("9.5")
    validator = LessThan(max=10, inclusive=True)
    assert not validator.is_valid(11)
    assert validator.get_messages() == {"not_less_inclusive": "The input is not less or equal than '10'"}


def test_between():
    """Test Between with and without inclusive bounds."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.validators import Between

    assert Between(min=1, max=10).is_valid(10)
    assert not Between(min=1, max=10, inclusive=False).is_valid(10)
    with pytest.raises(InvalidArgumentError):
        Between(min=1)


def test_string_length_messages():
    """Test StringLength reports too short and too long values."""
    from html_formgen.validators import StringLength

    validator = StringLength(min=3, max=5)
    assert not validator.is_valid("ab")
    assert validator.get_messages() == {"too_short": "The input is less than 3 characters long"}
    assert not validator.is_valid("abcdef")
    assert "too_long" in validator.get_messages()
    assert validator.is_valid("abcd")


def test_custom_message_templates():
    """Test message templates can be overridden."""
    from html_formgen.validators import StringLength

    validator = StringLength(min=3, messages={"too_short": "Need {min}, got '{value}'"})
    validator.is_valid("ab")
    assert validator.get_messages() == {"too_short": "Need 3, got 'ab'"}

    with pytest.raises(KeyError):
        validator.set_message("missing", "x")


def test_in_array_strict_and_loose():
    """Test InArray matches string forms unless strict."""
    from html_formgen.validators import InArray

    assert InArray(haystack=[1, 2]).is_valid("1")
    assert not InArray(haystack=[1, 2], strict=True).is_valid("1")
    assert InArray(haystack=[1, 2], strict=True).is_valid(1)


def test_email_digits_regex():
    """Test EmailAddress, Digits and Regex."""
    from html_formgen.validators import Digits, EmailAddress, Regex

    assert EmailAddress().is_valid("alice@example.com")
    assert not EmailAddress().is_valid("alice@")
    assert Digits().is_valid("0123")
    assert not Digits().is_valid("12a")
    assert Regex(r"^\d{4}$").is_valid(2013)


def test_explode_validates_each_item():
    """Test Explode splits strings and checks every item."""
    from html_formgen.validators import Explode

    validator = Explode(validator="EmailAddress")
    assert validator.is_valid("a@example.com,b@example.com")
    assert not validator.is_valid("a@example.com,nope")
    assert "invalid_format" in validator.get_messages()


def test_callback_validator():
    """Test Callback receives the value and context."""
    from html_formgen.validators import Callback

    validator = Callback(lambda value, context: value == context["confirm"])
    assert validator.is_valid("secret", {"confirm": "secret"})
    assert not validator.is_valid("secret", {"confirm": "other"})


def test_validator_chain_break_on_failure():
    """Test a breaking validator stops the chain."""
    from html_formgen.validators import ValidatorChain

    chain = ValidatorChain()
    chain.attach({"name": "Digits"}, break_chain_on_failure=True)
    chain.attach({"name": "StringLength", "options": {"min": 5}})

    assert not chain.is_valid("ab")
    assert list(chain.get_messages()) == ["not_digits"]


def test_validator_chain_priority():
    """Test higher priority validators run first."""
    from html_formgen.validators import GreaterThan, StringLength, ValidatorChain

    chain = ValidatorChain()
    chain.attach(StringLength(min=1))
    chain.attach(GreaterThan(min=0), priority=10)
    assert [type(v) for v in chain.get_validators()] == [GreaterThan, StringLength]


def test_unknown_validator_id_raises():
    """Test unknown ids fail loudly."""
    from html_formgen.validators import ValidatorChain

    with pytest.raises(KeyError):
        ValidatorChain().attach("NoSuchValidator")


def test_filters():
    """Test the standard filters."""
    from html_formgen.filters import Boolean, StringToLower, StringTrim, StripTags, ToInt, ToNull

    assert StringTrim().filter("  a  ") == "a"
    assert StringTrim(charlist="x").filter("xxaxx") == "a"
    assert StripTags().filter("<b>bold</b>") == "bold"
    assert StringToLower().filter("ABC") == "abc"
    assert ToInt().filter(" 42 ") == 42
    assert ToInt().filter("abc") == "abc"
    assert ToNull().filter("") is None
    assert ToNull(types=["string"]).filter(0) == 0
    assert Boolean().filter("yes") is True
    assert Boolean().filter("off") is False


def test_filter_chain_priority():
    """Test filters run in priority order."""
    from html_formgen.filters import FilterChain

    chain = FilterChain()
    chain.attach({"name": "StringToUpper"})
    chain.attach({"name": "StringTrim"}, priority=2000)
    chain.attach(lambda value: value + "!")
    assert chain.filter("  hi ") == "HI!"
