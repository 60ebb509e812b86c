"""Tests for inputs, input filters and the input filter factory."""

import pytest


IS_EMPTY = "Value is required and can't be empty"


def test_required_input_rejects_empty_value():
    """Test a required input fails on an empty value."""
    from html_formgen.input_filter import Input

    input_ = Input("name").set_value("")
    assert not input_.is_valid()
    assert input_.get_messages() == {"is_empty": IS_EMPTY}


def test_optional_input_without_value_is_valid():
    """Test optional inputs pass when no value was submitted."""
    from html_formgen.input_filter import Input

    assert Input("name").set_required(False).is_valid()


def test_allow_empty():
    """Test allow_empty lets a required input be empty."""
    from html_formgen.input_filter import Input

    assert Input("name").set_allow_empty(True).set_value("").is_valid()


def test_continue_if_empty_runs_validators():
    """Test continue_if_empty hands empty values to the validator chain."""
    from html_formgen.input_filter import Input

    input_ = Input("name").set_required(False).set_continue_if_empty(True).set_value("")
    input_.get_validator_chain().attach("NotEmpty")
    assert not input_.is_valid()
    assert "is_empty" in input_.get_messages()


def test_filters_run_before_validation():
    """Test values are filtered before validators see them."""
    from html_formgen.input_filter import Input

    input_ = Input("age").set_value(" 42 ")
    input_.get_filter_chain().attach("StringTrim")
    input_.get_validator_chain().attach("Digits")

    assert input_.is_valid()
    assert input_.get_value() == "42"
    assert input_.get_raw_value() == " 42 "


def test_error_message_replaces_validator_messages():
    """Test a custom error message replaces all failure messages."""
    from html_formgen.input_filter import Input

    input_ = Input("age").set_error_message("Age must be a number").set_value("abc")
    input_.get_validator_chain().attach("Digits")

    assert not input_.is_valid()
    assert input_.get_messages() == {"error_message": "Age must be a number"}


def test_fallback_value():
    """Test an invalid input falls back to its fallback value."""
    from html_formgen.input_filter import Input

    input_ = Input("page").set_fallback_value("1").set_value("abc")
    input_.get_validator_chain().attach("Digits")

    assert input_.is_valid()
    assert input_.get_value() == "1"
    assert input_.get_messages() == {}


def test_input_filter_validates_named_inputs():
    """Test InputFilter passes data to each input and collects messages."""
    from html_formgen.input_filter import Input, InputFilter

    input_filter = InputFilter()
    input_filter.add(Input("username"))
    input_filter.add(Input("nickname").set_required(False))

    input_filter.set_data({"username": ""})
    assert not input_filter.is_valid()
    assert input_filter.get_messages() == {"username": {"is_empty": IS_EMPTY}}
    assert list(input_filter.get_invalid_input()) == ["username"]
    assert list(input_filter.get_valid_input()) == ["nickname"]

    input_filter.set_data({"username": "alice"})
    assert input_filter.is_valid()
    assert input_filter.get_values() == {"username": "alice", "nickname": None}


def test_input_filter_requires_data():
    """Test validating without data and setting non-mapping data fail."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.input_filter import Input, InputFilter

    input_filter = InputFilter().add(Input("username"))
    with pytest.raises(InvalidArgumentError, match="no data"):
        input_filter.is_valid()
    with pytest.raises(InvalidArgumentError, match="mapping"):
        input_filter.set_data(["alice"])


def test_add_requires_name():
    """Test inputs without a name cannot be added."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.input_filter import Input, InputFilter

    with pytest.raises(InvalidArgumentError):
        InputFilter().add(Input())
    with pytest.raises(InvalidArgumentError):
        InputFilter().add(InputFilter())


def test_get_unknown_input_raises():
    """Test get() fails loudly for unknown names."""
    from html_formgen.exceptions import InvalidElementError
    from html_formgen.input_filter import InputFilter

    with pytest.raises(InvalidElementError):
        InputFilter().get("missing")


def test_duplicate_inputs_are_merged():
    """Test adding a second input under the same name merges the chains."""
    from html_formgen.input_filter import Input, InputFilter

    first = Input("code")
    first.get_filter_chain().attach("StringTrim")
    second = Input("code")
    second.get_validator_chain().attach("Digits")

    input_filter = InputFilter().add(first).add(second)
    merged = input_filter.get("code")

    assert merged is first
    assert len(merged.get_filter_chain()) == 1
    assert len(merged.get_validator_chain()) == 1
    assert input_filter.set_data({"code": " 12 "}).is_valid()


def test_nested_input_filter():
    """Test nested filters receive their sub-mapping."""
    from html_formgen.input_filter import Input, InputFilter

    address = InputFilter().add(Input("street"))
    input_filter = InputFilter().add(Input("name")).add(address, "address")

    input_filter.set_data({"name": "Ada", "address": {"street": ""}})
    assert not input_filter.is_valid()
    assert input_filter.get_messages() == {"address": {"street": {"is_empty": IS_EMPTY}}}

    input_filter.set_data({"name": "Ada", "address": {"street": "Main"}})
    assert input_filter.is_valid()
    assert input_filter.get_values() == {"name": "Ada", "address": {"street": "Main"}}


def test_validation_group():
    """Test only inputs in the validation group are validated."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.input_filter import Input, InputFilter

    input_filter = InputFilter().add(Input("first")).add(Input("second"))
    input_filter.set_data({"first": "x"})
    input_filter.set_validation_group("first")

    assert input_filter.is_valid()
    assert input_filter.get_values() == {"first": "x"}

    with pytest.raises(InvalidArgumentError, match="unknown input"):
        input_filter.set_validation_group(["third"])


def test_nested_validation_group():
    """Test a mapping limits nested filters too."""
    from html_formgen.input_filter import Input, InputFilter

    address = InputFilter().add(Input("street")).add(Input("city"))
    input_filter = InputFilter().add(Input("name")).add(address, "address")
    input_filter.set_data({"address": {"street": "Main"}})
    input_filter.set_validation_group({"address": ["street"]})

    assert input_filter.is_valid()
    assert input_filter.get_values() == {"address": {"street": "Main"}}


def test_break_on_failure_stops_validation():
    """Test a failing break_on_failure input stops the remaining inputs."""
    from html_formgen.input_filter import Input, InputFilter

    input_filter = InputFilter()
    input_filter.add(Input("first").set_break_on_failure(True))
    input_filter.add(Input("second"))
    input_filter.set_data({})

    assert not input_filter.is_valid()
    assert list(input_filter.get_messages()) == ["first"]


def test_collection_input_filter():
    """Test each collection entry is validated with the template filter."""
    from html_formgen.input_filter import CollectionInputFilter, Input, InputFilter

    template = InputFilter().add(Input("street"))
    collection = CollectionInputFilter(input_filter=template)

    collection.set_data([{"street": "Main"}, {"street": ""}])
    assert not collection.is_valid()
    assert collection.get_messages() == {1: {"street": {"is_empty": IS_EMPTY}}}

    collection.set_data([{"street": "Main"}, {"street": "High"}])
    assert collection.is_valid()
    assert collection.get_values() == [{"street": "Main"}, {"street": "High"}]


def test_collection_count_and_required():
    """Test minimum counts and required collections."""
    from html_formgen.input_filter import CollectionInputFilter

    collection = CollectionInputFilter(count=2)
    collection.set_data([{}])
    assert not collection.is_valid()
    assert "not_enough" in collection.get_messages()

    required = CollectionInputFilter(is_required=True).set_data([])
    assert not required.is_valid()
    assert "is_empty" in required.get_messages()


def test_file_input_empty_upload():
    """Test an upload with error 4 counts as empty."""
    from html_formgen.input_filter import FileInput

    required = FileInput("upload").set_value({"error": 4, "name": ""})
    assert not required.is_valid()
    assert required.get_messages() == {"is_empty": IS_EMPTY}

    optional = FileInput("upload").set_required(False).set_value({"error": 4})
    assert optional.is_valid()


def test_file_input_upload_errors():
    """Test upload error codes are reported by the upload validator."""
    from html_formgen.input_filter import FileInput

    valid = FileInput("upload").set_value({"error": 0, "name": "a.txt", "tmp_name": "/tmp/upload-a"})
    assert valid.is_valid()

    too_big = FileInput("upload").set_value({"error": 1, "name": "a.txt"})
    assert not too_big.is_valid()
    assert "ini_size" in too_big.get_messages()


def test_factory_creates_input_filter():
    """Test the factory builds inputs with filters and validators."""
    from html_formgen.input_filter import InputFilterFactory
    from html_formgen.validators import Digits, StringLength

    input_filter = InputFilterFactory().create_input_filter({
        "code": {
            "required": True,
            "filters": [{"name": "StringTrim"}],
            "validators": [
                {"name": "Digits", "break_chain_on_failure": True},
                {"name": "StringLength", "options": {"min": 3}},
            ],
        },
    })

    code = input_filter.get("code")
    assert code.get_name() == "code"
    assert [type(v) for v in code.get_validator_chain().get_validators()] == [Digits, StringLength]

    input_filter.set_data({"code": " ab "})
    assert not input_filter.is_valid()
    assert list(input_filter.get_messages()["code"]) == ["not_digits"]


def test_factory_nested_and_typed_inputs():
    """Test nested filters, file inputs and collection filters from a spec."""
    from html_formgen.input_filter import CollectionInputFilter, FileInput, InputFilter, InputFilterFactory

    input_filter = InputFilterFactory().create_input_filter({
        "avatar": {"type": "file", "required": False},
        "address": {"type": "input_filter", "street": {"required": True}},
        "items": {"type": "collection", "count": 1, "input_filter": {"sku": {"required": True}}},
        0: {"name": "type", "required": False},
    })

    assert isinstance(input_filter.get("avatar"), FileInput)
    assert isinstance(input_filter.get("address"), InputFilter)
    assert input_filter.get("address").get("street").is_required()
    assert isinstance(input_filter.get("items"), CollectionInputFilter)
    assert input_filter.get("items").count == 1
    assert input_filter.has("type")


def test_factory_rejects_unknown_types():
    """Test unknown input types raise InvalidArgumentError."""
    from html_formgen.exceptions import InvalidArgumentError
    from html_formgen.input_filter import InputFilterFactory

    with pytest.raises(InvalidArgumentError, match="Unknown input type"):
        InputFilterFactory().create_input({"name": "x", "type": "nope"})
    with pytest.raises(InvalidArgumentError):
        InputFilterFactory().create_input_filter(42)
