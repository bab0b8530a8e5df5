import pytest

from ttpforge.outputs import JSONFilter, OutputError, Spec, parse


def test_simple_valid_path():
    spec = Spec.from_yaml("filters:\n  - json_path: foo.bar")
    assert spec.apply('{"foo":{"bar":"baz"}}') == "baz"


def test_valid_path_but_not_found():
    spec = Spec.from_yaml("filters:\n  - json_path: a.b")
    with pytest.raises(OutputError):
        spec.apply('{"foo":{"bar":"baz"}}')


def test_invalid_path():
    spec = Spec.from_yaml("filters:\n  - json_path: a.....b")
    with pytest.raises(OutputError):
        spec.apply('{"foo":{"bar":"baz"}}')


def test_parse_multiple_outputs():
    specs = {
        "first": Spec(filters=[JSONFilter(path="foo.bar")]),
        "second": Spec(filters=[JSONFilter(path="a")]),
    }
    results = parse(specs, '{"foo":{"bar":"baz"},"a":"b"}')
    assert len(results) == 2
    assert results["first"] == "baz"
    assert results["second"] == "b"


def test_parse_propagates_errors():
    specs = {"missing": Spec(filters=[JSONFilter(path="nope")])}
    with pytest.raises(OutputError):
        parse(specs, '{"a":"b"}')


def test_filters_chain_in_order():
    spec = Spec(filters=[JSONFilter(path="foo"), JSONFilter(path="bar")])
    assert spec.apply('{"foo":{"bar":"baz"}}') == "baz"


def test_object_result_is_json_text():
    assert JSONFilter(path="foo").apply('{"foo":{"bar":"baz"}}') == '{"bar":"baz"}'


def test_number_and_array_index():
    assert JSONFilter(path="a.1").apply('{"a":[10,20]}') == "20"
    assert JSONFilter(path="a.#").apply('{"a":[10,20]}') == "2"


def test_trailing_newline_from_stdout_is_accepted():
    assert JSONFilter(path="foo.bar").apply('{"foo":{"bar":"baz"}}\n') == "baz"


def test_non_json_input_not_found():
    with pytest.raises(OutputError):
        JSONFilter(path="a").apply("not json")


def test_spec_without_filters_rejected():
    with pytest.raises(OutputError):
        Spec.from_yaml("filters: []")
    with pytest.raises(OutputError):
        Spec.from_dict({})


def test_non_mapping_spec_rejected():
    with pytest.raises(OutputError):
        Spec.from_dict(["json_path: a"])


def test_scalar_filter_entries_are_ignored():
    spec = Spec.from_dict({"filters": ["junk", {"json_path": "a"}]})
    assert [f.path for f in spec.filters] == ["a"]
    assert spec.apply('{"a":"b"}') == "b"