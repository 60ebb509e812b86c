"""Tests for the annotation builder."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Annotated, ClassVar, List, Optional

import pytest

from html_formgen.annotation import (
    AllowEmpty, Annotation, Attributes, ComposedObject, ContinueIfEmpty, ErrorMessage, Exclude,
    Filter, Flags, InputFilter, Name, Options, Required, Type, ValidationGroup, Validator,
    form_annotations,
)


@form_annotations(Name("user"), Attributes({"class": "user-form"}), Options({"use_as_base_fieldset": True}))
class User:
    username: Annotated[str, Required(), Filter("StringTrim"), Validator("StringLength", {"min": 3})]
    email: Annotated[str, Type("email"), Attributes({"placeholder": "you@example.com"})]
    password_hash: Annotated[str, Exclude()]
    nickname: str


class Plain:
    title: str


class Address:
    street: Annotated[str, Required()]
    city: str


class Customer:
    name: Annotated[str, Required()]
    address: Annotated[object, ComposedObject(Address)]
    phone: str


class Shipment:
    reference: str
    addresses: Annotated[list, ComposedObject(Address, is_collection=True, options={"count": 2})]


@form_annotations(InputFilter({"username": {"required": False}, "extra": {"required": False}}))
class WithFilter:
    username: Annotated[str, Required(), Filter("StringTrim")]


class Typed:
    type: Annotated[str, Required()]


class Color(Enum):
    RED = "r"
    GREEN = "g"


@dataclass
class Settings:
    title: str = ""
    count: int = 0
    enabled: bool = False
    start: Optional[date] = None
    color: Color = Color.RED
    email: Annotated[str, Type("email")] = ""


@dataclass
class PostalAddress:
    street: Annotated[str, Required()]
    city: str = ""


@dataclass
class Recipient:
    name: Annotated[str, Required()] = ""
    address: Annotated[Optional[PostalAddress], ComposedObject(PostalAddress)] = None


class Route:
    stops: Annotated[list, ComposedObject(PostalAddress, is_collection=True)]


@dataclass
class Profile:
    __form_annotations__ = [Name("profile")]
    city: str = field(default="", metadata={"form": [Required(), Options({"label": "City"})]})
    zip_code: str = ""


def _element_names(spec):
    return [entry["spec"]["name"] for entry in spec["elements"]]


def test_class_annotations_configure_form(builder):
    """Test Name, Attributes and Options on the class configure the form."""
    spec = builder.get_form_specification(User)

    assert spec["name"] == "user"
    assert spec["attributes"] == {"class": "user-form"}
    assert spec["options"] == {"use_as_base_fieldset": True}


def test_elements_follow_property_order(builder):
    """Test elements are built in declaration order and excluded properties are skipped."""
    spec = builder.get_form_specification(User)

    assert _element_names(spec) == ["username", "email", "nickname"]
    assert spec["fieldsets"] == []


def test_element_annotations_build_element_spec(builder):
    """Test Required, Type and Attributes end up on the element spec."""
    spec = builder.get_form_specification(User)
    username, email, nickname = spec["elements"]

    assert username == {"flags": {}, "spec": {"name": "username", "attributes": {"required": "required"}}}
    assert email["spec"]["type"] == "email"
    assert email["spec"]["attributes"] == {"placeholder": "you@example.com"}
    assert nickname["spec"] == {"name": "nickname"}


def test_input_filter_spec_only_for_configured_inputs(builder):
    """Test only properties with input configuration get an input spec."""
    spec = builder.get_form_specification(User)

    assert spec["input_filter"] == {
        "username": {
            "name": "username",
            "required": True,
            "filters": [{"name": "StringTrim"}],
            "validators": [{"name": "StringLength", "options": {"min": 3}}],
        },
    }


def test_fallback_name_is_class_name(builder):
    """Test a class without Name is named after the class."""
    spec = builder.get_form_specification(Plain)
    assert spec["name"] == "Plain"
    assert _element_names(spec) == ["title"]


def test_class_annotations_are_not_inherited(builder):
    """Test subclasses keep base properties but not the base class annotations."""

    class Admin(User):
        level: int

    spec = builder.get_form_specification(Admin)
    assert spec["name"] == "Admin"
    assert _element_names(spec) == ["username", "email", "nickname", "level"]


def test_private_and_class_var_properties_are_skipped(builder):
    """Test underscore names and ClassVar annotations never become elements."""

    class Internal:
        visible: str
        _hidden: str
        registry: ClassVar[dict] = {}

    spec = builder.get_form_specification(Internal)
    assert _element_names(spec) == ["visible"]


def test_instance_entity(builder):
    """Test an instance is reflected through its class."""
    spec = builder.get_form_specification(Plain())
    assert spec["name"] == "Plain"


def test_class_name_string_entity(builder):
    """Test importable class names are resolved."""
    spec = builder.get_form_specification(f"{__name__}:Plain")
    assert spec["name"] == "Plain"


@pytest.mark.parametrize("entity", [None, 42, "not a class", "missing.module:Thing", [Plain]])
def test_invalid_entity_raises(builder, entity):
    """Test invalid entities raise InvalidArgumentError."""
    from html_formgen.exceptions import InvalidArgumentError

    with pytest.raises(InvalidArgumentError, match="expects an object or valid class name"):
        builder.get_form_specification(entity)


def test_composed_object_becomes_fieldset(builder):
    """Test ComposedObject builds a nested fieldset and nested input filter."""
    spec = builder.get_form_specification(Customer)

    assert _element_names(spec) == ["name", "phone"]
    assert len(spec["fieldsets"]) == 1
    address = spec["fieldsets"][0]["spec"]
    assert address["name"] == "address"
    assert address["type"] == "fieldset"
    assert address["object"] is Address
    assert _element_names(address) == ["street", "city"]

    assert spec["input_filter"]["address"] == {
        "type": "input_filter",
        "street": {"name": "street", "required": True},
    }
    assert spec["input_filter"]["name"] == {"name": "name", "required": True}


def test_nested_build_keeps_top_level_entity(builder):
    """Test get_entity reports the outer class after a nested build."""
    builder.get_form_specification(Customer)
    assert builder.get_entity() is Customer


def test_preserve_defined_order_keeps_fieldsets_in_elements(builder):
    """Test fieldsets stay among the elements when preserving order."""
    builder.set_preserve_defined_order(True)
    spec = builder.get_form_specification(Customer)

    assert _element_names(spec) == ["name", "address", "phone"]
    assert spec["fieldsets"] == []


def test_preserve_defined_order_from_config(form_config):
    """Test the builder default comes from the configuration."""
    from html_formgen.annotation import AnnotationBuilder

    form_config.preserve_defined_order = True
    assert AnnotationBuilder().preserve_defined_order() is True
    assert AnnotationBuilder(preserve_defined_order=False).preserve_defined_order() is False


def test_composed_object_collection(builder):
    """Test ComposedObject with is_collection builds a collection of fieldsets."""
    spec = builder.get_form_specification(Shipment)

    collection = spec["fieldsets"][0]["spec"]
    assert collection["type"] == "collection"
    assert collection["options"]["count"] == 2
    target = collection["options"]["target_element"]
    assert target["type"] == "fieldset"
    assert target["object"] is Address
    assert "input_filter" not in target

    assert spec["input_filter"]["addresses"] == {
        "type": "collection",
        "input_filter": {"type": "input_filter", "street": {"name": "street", "required": True}},
    }


def test_explicit_input_filter_overrides_derived_spec(builder):
    """Test an InputFilter annotation is merged over the derived input specs."""
    spec = builder.get_form_specification(WithFilter)

    assert spec["input_filter"]["username"] == {
        "name": "username",
        "required": False,
        "filters": [{"name": "StringTrim"}],
    }
    assert spec["input_filter"]["extra"] == {"required": False}


def test_element_named_type_is_appended_by_index(builder):
    """Test an element named "type" cannot clash with the filter type key."""
    spec = builder.get_form_specification(Typed)
    assert spec["input_filter"] == {0: {"name": "type", "required": True}}


def test_input_annotations():
    """Test AllowEmpty, ContinueIfEmpty, ErrorMessage and Flags."""
    from html_formgen.annotation import AnnotationBuilder

    class Comment:
        body: Annotated[str, AllowEmpty(), ContinueIfEmpty(), ErrorMessage("Say something"),
                        Flags({"priority": 10})]

    spec = AnnotationBuilder().get_form_specification(Comment)
    assert spec["elements"][0]["flags"] == {"priority": 10}
    assert spec["input_filter"]["body"] == {
        "name": "body",
        "allow_empty": True,
        "continue_if_empty": True,
        "error_message": "Say something",
    }


def test_validation_group_annotation(builder):
    """Test ValidationGroup on the class lands in the form spec."""

    @form_annotations(ValidationGroup(["first"]))
    class Partial:
        first: str
        second: str

    spec = builder.get_form_specification(Partial)
    assert spec["validation_group"] == ["first"]


def test_metadata_reader(builder):
    """Test dataclass field metadata can carry the annotations."""
    spec = builder.get_form_specification(Profile, use_metadata=True)

    assert spec["name"] == "profile"
    assert _element_names(spec) == ["city", "zip_code"]
    city = spec["elements"][0]["spec"]
    assert city["options"] == {"label": "City"}
    assert city["attributes"] == {"required": "required"}
    assert spec["input_filter"] == {"city": {"name": "city", "required": True}}


def test_metadata_reader_requires_dataclass(builder):
    """Test use_metadata rejects classes that are not dataclasses."""
    from html_formgen.exceptions import InvalidArgumentError

    with pytest.raises(InvalidArgumentError, match="dataclass"):
        builder.get_form_specification(Plain, use_metadata=True)


def test_infer_types_from_type_hints():
    """Test element types are derived from type hints when enabled."""
    from html_formgen.annotation import AnnotationBuilder

    spec = AnnotationBuilder(infer_types=True).get_form_specification(Settings)
    elements = {entry["spec"]["name"]: entry["spec"] for entry in spec["elements"]}

    assert elements["title"]["type"] == "text"
    assert elements["count"]["type"] == "number"
    assert elements["enabled"]["type"] == "checkbox"
    assert elements["start"]["type"] == "date"
    assert elements["color"]["type"] == "select"
    assert elements["color"]["options"] == {"value_options": {"r": "RED", "g": "GREEN"}}
    assert elements["email"]["type"] == "email"


def test_infer_types_disabled_by_default(builder):
    """Test no types are guessed unless inference is enabled."""
    spec = builder.get_form_specification(Settings)
    elements = {entry["spec"]["name"]: entry["spec"] for entry in spec["elements"]}
    assert "type" not in elements["title"]
    assert elements["email"]["type"] == "email"


def test_infer_element_spec_variants(form_config):
    """Test inference of Optional, List[Enum] and custom types."""
    from html_formgen.annotation import infer_element_spec

    class Money(float):
        pass

    assert infer_element_spec(Optional[int]) == {"type": "number"}
    assert infer_element_spec(List[Color]) == {
        "type": "select",
        "options": {"value_options": {"r": "RED", "g": "GREEN"}},
        "attributes": {"multiple": True},
    }
    assert infer_element_spec(Money) == {"type": "number"}
    assert infer_element_spec(bytes) is None

    form_config.custom_element_types = {Money: "text"}
    assert infer_element_spec(Money) == {"type": "text"}


def test_custom_annotation_listener(builder):
    """Test custom annotations are handled by extra listeners."""
    from html_formgen.annotation import EVENT_CONFIGURE_ELEMENT

    class Placeholder(Annotation):
        def __init__(self, text):
            self.text = text

    def handle_placeholder(e):
        annotation = e.get_param("annotation")
        if isinstance(annotation, Placeholder):
            spec = e.get_param("element_spec")["spec"]
            spec.setdefault("attributes", {})["placeholder"] = annotation.text

    class Search:
        query: Annotated[str, Placeholder("Search...")]

    builder.get_event_manager().attach(EVENT_CONFIGURE_ELEMENT, handle_placeholder)
    spec = builder.get_form_specification(Search)
    assert spec["elements"][0]["spec"]["attributes"] == {"placeholder": "Search..."}


def test_create_form_builds_working_form(builder):
    """Test create_form returns a form that validates with the derived filter."""
    from html_formgen.elements import Email, Form

    form = builder.create_form(User)

    assert isinstance(form, Form)
    assert form.get_name() == "user"
    assert form.get_attribute("class") == "user-form"
    assert isinstance(form.get("email"), Email)
    assert not form.has("password_hash")

    form.set_data({"username": "  al  ", "email": "al@example.com", "nickname": ""})
    assert not form.is_valid()
    assert "too_short" in form.get_messages()["username"]

    form.set_data({"username": "  alice  ", "email": "alice@example.com", "nickname": ""})
    assert form.is_valid()
    assert form.get_data() == {"username": "alice", "email": "alice@example.com", "nickname": ""}


def test_create_form_with_composed_object(builder):
    """Test a nested fieldset from ComposedObject binds its own object."""
    from html_formgen.elements import Fieldset

    form = builder.create_form(Customer)
    address = form.get("address")

    assert isinstance(address, Fieldset)
    assert isinstance(address.get_object(), Address)

    form.set_data({"name": "Ada", "address": {"street": ""}})
    assert not form.is_valid()
    assert "is_empty" in form.get_messages()["address"]["street"]


def test_composed_object_with_required_constructor_arguments(builder):
    """Test a composed class needing constructor arguments is built from validated values."""
    form = builder.create_form(Recipient)
    address = form.get("address")

    assert address.allowed_object_binding_class is PostalAddress
    assert address.get_object() is None

    recipient = Recipient(name="Ada")
    form.bind(recipient)
    form.set_data({"name": "Ada", "address": {"street": "High Street", "city": "Leeds"}})

    assert form.is_valid()
    assert form.get_data() is recipient
    assert recipient.address == PostalAddress(street="High Street", city="Leeds")


def test_form_without_object_creates_binding_class_instance(factory):
    """Test a form with only a binding class returns a new instance from get_data()."""
    form = factory.create_form({
        "name": "address",
        "object": PostalAddress,
        "elements": [{"spec": {"name": "street"}}, {"spec": {"name": "city"}}],
        "input_filter": {"street": {"required": True}},
    })
    form.set_data({"street": "Mill Lane", "city": ""})

    assert form.is_valid()
    assert form.get_data() == PostalAddress(street="Mill Lane", city="")


def test_binding_class_rejecting_values_raises():
    """Test constructor failures surface as InvalidArgumentError."""
    from html_formgen.elements import Fieldset
    from html_formgen.exceptions import InvalidArgumentError

    fieldset = Fieldset("address", {"allowed_object_binding_class": PostalAddress})
    fieldset.add({"name": "city"})

    with pytest.raises(InvalidArgumentError, match="PostalAddress"):
        fieldset.bind_values({"city": "Leeds"})


def test_collection_of_classes_with_required_constructor_arguments(builder):
    """Test each collection entry becomes a new instance of the composed class."""
    form = builder.create_form(Route)
    stops = form.get("stops")

    assert stops.get_target_element().allowed_object_binding_class is PostalAddress
    assert stops.bind_values([{"street": "Mill Lane"}, {"street": "Quay", "city": "York"}]) == [
        PostalAddress(street="Mill Lane"),
        PostalAddress(street="Quay", city="York"),
    ]
