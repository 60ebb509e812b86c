"""Tests for the form factory."""

import pytest


class Account:
    def __init__(self):
        self.username = "alice"


def test_create_dispatches_on_type(factory):
    """Test create() picks the element class from the type id."""
    from html_formgen.elements import Collection, Date, Element, Fieldset, Form, Text

    assert type(factory.create({"name": "a", "type": "text"})) is Text
    assert type(factory.create({"name": "a", "type": "date"})) is Date
    assert type(factory.create({"name": "a"})) is Element
    assert type(factory.create({"name": "a", "type": "fieldset"})) is Fieldset
    assert type(factory.create({"name": "a", "type": "collection"})) is Collection
    assert type(factory.create({"name": "a", "type": Form})) is Form


def test_type_ids_are_normalized(factory):
    """Test ids match regardless of case and separators."""
    from html_formgen.elements import DateTimeLocal

    assert type(factory.create({"name": "at", "type": "DateTimeLocal"})) is DateTimeLocal
    assert type(factory.create({"name": "at", "type": "datetime_local"})) is DateTimeLocal


def test_create_rejects_bad_specs(factory):
    """Test non-mapping specs and unknown types raise InvalidArgumentError."""
    from html_formgen.exceptions import InvalidArgumentError

    with pytest.raises(InvalidArgumentError, match="mapping"):
        factory.create(["text"])
    with pytest.raises(InvalidArgumentError, match="nope"):
        factory.create({"name": "a", "type": "nope"})
    with pytest.raises(InvalidArgumentError):
        factory.create({"name": "a", "type": dict})


def test_create_element_applies_spec(factory):
    """Test name, options and attributes are applied."""
    element = factory.create_element({
        "name": "email",
        "type": "email",
        "options": {"label": "Email address"},
        "attributes": {"placeholder": "you@example.com", "id": "email"},
    })

    assert element.get_name() == "email"
    assert element.get_label() == "Email address"
    assert element.get_attribute("placeholder") == "you@example.com"
    assert element.get_attribute("type") == "email"


def test_create_fieldset_with_priorities(factory):
    """Test child elements are ordered by their priority flag."""
    fieldset = factory.create_fieldset({
        "name": "account",
        "elements": [
            {"spec": {"name": "username", "type": "text"}},
            {"spec": {"name": "submit", "type": "submit"}, "flags": {"priority": -10}},
            {"spec": {"name": "csrf", "type": "hidden"}, "flags": {"priority": 100}},
        ],
    })

    assert [element.get_name() for element in fieldset] == ["csrf", "username", "submit"]


def test_create_fieldset_accepts_bare_specs_and_mappings(factory):
    """Test entries may omit the spec wrapper and collections may be mappings."""
    from html_formgen.elements import Fieldset

    fieldset = factory.create_fieldset({
        "name": "outer",
        "elements": {"first": {"name": "first", "type": "text"}},
        "fieldsets": [{"spec": {"name": "inner", "elements": [{"spec": {"name": "deep"}}]}}],
    })

    assert fieldset.has("first")
    inner = fieldset.get("inner")
    assert isinstance(inner, Fieldset)
    assert inner.has("deep")


def test_create_fieldset_hydrator_and_object(factory):
    """Test hydrators are resolved and object classes are instantiated."""
    from html_formgen.hydrators import ClassMethodsHydrator, DictHydrator

    fieldset = factory.create_fieldset({"name": "account", "object": Account, "hydrator": "class_methods"})
    assert isinstance(fieldset.get_object(), Account)
    assert isinstance(fieldset.get_hydrator(), ClassMethodsHydrator)

    fieldset = factory.create_fieldset({"name": "data", "hydrator": {"type": "dict"}})
    assert isinstance(fieldset.get_hydrator(), DictHydrator)


def test_unknown_hydrator_raises(factory):
    """Test an unknown hydrator id is reported with the fieldset name."""
    from html_formgen.exceptions import InvalidArgumentError

    with pytest.raises(InvalidArgumentError, match="account"):
        factory.create_fieldset({"name": "account", "hydrator": "nope"})


def test_create_form(factory):
    """Test forms get their input filter, factory and validation group."""
    from html_formgen.elements import Form

    form = factory.create_form({
        "name": "login",
        "attributes": {"action": "/login"},
        "elements": [
            {"spec": {"name": "username", "type": "text"}},
            {"spec": {"name": "remember", "type": "checkbox"}},
        ],
        "input_filter": {"username": {"required": True, "filters": [{"name": "StringTrim"}]}},
        "validation_group": ["username"],
    })

    assert isinstance(form, Form)
    assert form.get_attribute("action") == "/login"
    assert form.get_attribute("method") == "POST"
    assert form.get_input_filter_factory() is factory.get_input_filter_factory()
    assert form.get_validation_group() == ["username"]

    form.set_data({"username": " bob "})
    assert form.is_valid()
    assert form.get_data() == {"username": "bob"}


def test_create_form_requires_form_type(factory):
    """Test create_form refuses non-form types."""
    from html_formgen.exceptions import InvalidArgumentError

    with pytest.raises(InvalidArgumentError, match="Form subclass"):
        factory.create_form({"name": "x", "type": "fieldset"})


def test_create_form_with_input_filter_instance(factory):
    """Test a ready input filter is used as given."""
    from html_formgen.input_filter import Input, InputFilter

    input_filter = InputFilter().add(Input("username"))
    form = factory.create_form({"name": "x", "input_filter": input_filter})
    assert form.get_input_filter() is input_filter


def test_collection_from_spec(factory):
    """Test a collection builds its target element from a spec."""
    from html_formgen.elements import Collection, Fieldset

    collection = factory.create({
        "name": "addresses",
        "type": "collection",
        "options": {
            "count": 2,
            "target_element": {"type": "fieldset", "name": "address", "elements": [{"spec": {"name": "street"}}]},
        },
    })

    assert isinstance(collection, Collection)
    assert isinstance(collection.get_target_element(), Fieldset)
    assert collection.count_option == 2


def test_module_create_form():
    """Test the module-level helper."""
    from html_formgen.factory import create_form

    form = create_form({"name": "search", "elements": [{"spec": {"name": "q", "type": "text"}}]})
    assert form.has("q")
