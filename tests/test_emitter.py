import pytest

from transpiler import FormatOptions, InvalidAttributeIdentifier, emit_attributes, var


def test_insertion_order_is_preserved():
    assert emit_attributes({"b": 1, "a": 2, "c": 3}) == ["b = 1", "a = 2", "c = 3"]


def test_indentation():
    assert emit_attributes({"ami": "x", "count": 2}, 1) == ['  ami = "x"', "  count = 2"]
    assert emit_attributes({"ami": "x"}, 2, options=FormatOptions(indent_width=4)) == ['        ami = "x"']


def test_empty_mapping_emits_nothing():
    assert emit_attributes({}) == []


def test_multiline_value_stays_in_one_entry():
    lines = emit_attributes({"tags": {"Name": "web"}}, 1)
    assert lines == ['  tags = {\n    Name = "web"\n  }']


@pytest.mark.parametrize("key", ["_private", "my-key", "a1", "instance_type"])
def test_valid_identifiers(key):
    assert emit_attributes({key: var("x")}) == [f"{key} = var.x"]


@pytest.mark.parametrize("key", ["1abc", "has space", "", "dotted.key", "-lead", 3])
def test_invalid_identifiers(key):
    with pytest.raises(InvalidAttributeIdentifier):
        emit_attributes({key: 1})


def test_invalid_identifier_reports_path():
    with pytest.raises(InvalidAttributeIdentifier) as exc:
        emit_attributes({"ok": 1, "bad key": 2}, path=("resource.aws_instance.web",))
    assert exc.value.path == ("resource.aws_instance.web", "bad key")
    assert str(exc.value).startswith("EncodingError: invalid attribute identifier")


def test_align_equals():
    options = FormatOptions(align_equals=True)
    lines = emit_attributes({"ami": "x", "instance_type": "t3.micro"}, options=options)
    assert lines == [
        "ami".ljust(len("instance_type")) + ' = "x"',
        'instance_type = "t3.micro"',
    ]


def test_align_equals_groups_break_on_multiline_values():
    options = FormatOptions(align_equals=True)
    lines = emit_attributes({"a": 1, "tags": {"k": "v"}, "long_name": 2}, options=options)
    assert lines == ["a = 1", 'tags = {\n  k = "v"\n}', "long_name = 2"]
