import json
import logging

import pytest

import tjson
from tjsonlib.codec import Codec, Document
from tjsonlib.errors import (TagSyntaxError, DuplicateMemberError, RootShapeError,
        UnderlyingJsonError, SetOrderError, TypeMismatchError, FormatError)
from tjsonlib.tags import INTEGER, OBJECT, SetType, ArrayType
from tjsonlib.values import Integer, String, Object, Array, Set, MAX_NESTING

EXAMPLE = """
{
  "array-example:A<O>": [
    {
      "string-example:s": "foobar",
      "binary-example:d": "QklOQVJZ",
      "float-example:f": 0.42,
      "int-example:i": "42",
      "timestamp-example:t": "2016-11-06T22:27:34Z",
      "boolean-example:b": true
    }
  ],
  "set-example:S<i>": ["1", "2", "3"]
}
"""


def test_parse_example():
    doc = tjson.parse_document(EXAMPLE)
    assert isinstance(doc, Document)
    assert list(doc) == ["array-example", "set-example"]
    item = doc["array-example"][0]
    assert item["string-example"].value == "foobar"
    assert item["binary-example"].value == b"BINARY"
    assert item["float-example"].value == 0.42
    assert item["int-example"].value == 42
    assert item["timestamp-example"].format() == "2016-11-06T22:27:34Z"
    assert item["boolean-example"].value is True
    assert doc["set-example"].type == SetType(INTEGER)
    assert doc.pointer("/array-example/0/int-example") == Integer(42)


def test_write_example():
    doc = tjson.parse_document(EXAMPLE)
    assert json.loads(tjson.write_document(doc)) == json.loads(EXAMPLE)


def test_round_trip():
    doc = tjson.parse_document(EXAMPLE)
    assert tjson.parse_document(tjson.write_document(doc)) == doc


def test_write_constructed():
    obj = Object()
    obj["count"] = Integer(42)
    obj["ids"] = Set(INTEGER, [3, 1, 2])
    assert tjson.write_document(obj) == '{"count:i": "42", "ids:S<i>": ["1", "2", "3"]}'


def test_write_indent():
    codec = Codec(indent=2)
    out = codec.dump(Object({"a": String("x")}))
    assert out == '{\n  "a:s": "x"\n}'


@pytest.mark.parametrize("text", ['["1"]', '"x"', '1', 'true', 'null'])
def test_root_must_be_object(text):
    with pytest.raises(RootShapeError):
        tjson.parse_document(text)


def test_root_must_be_object_on_write():
    with pytest.raises(RootShapeError):
        tjson.write_document(Array(INTEGER, [1]))
    with pytest.raises(RootShapeError):
        Document(Integer(1))


@pytest.mark.parametrize("text", ['{', '{"a:i": }', '', '{"a:i": "1",}', "{'a:i': '1'}"])
def test_malformed_json(text):
    with pytest.raises(UnderlyingJsonError) as ei:
        tjson.parse_document(text)
    assert str(ei.value).startswith("malformed JSON")
    assert ei.value.__cause__ is not None


@pytest.mark.parametrize("text", ['{"a:f": NaN}', '{"a:f": Infinity}', '{"a:f": -Infinity}'])
def test_non_finite_literals_rejected(text):
    with pytest.raises(UnderlyingJsonError):
        tjson.parse_document(text)


def test_deeply_nested_json():
    text = '{"a:A<i>": ' + "[" * 100000 + "]" * 100000 + "}"
    with pytest.raises(UnderlyingJsonError):
        tjson.parse_document(text)


def test_duplicate_raw_keys():
    with pytest.raises(DuplicateMemberError):
        tjson.parse_document('{"x:i": "1", "x:i": "2"}')


def test_duplicate_bare_names():
    with pytest.raises(DuplicateMemberError):
        tjson.parse_document('{"x:i": "1", "x:s": "one"}')


def test_bad_tag():
    with pytest.raises(TagSyntaxError):
        tjson.parse_document('{"x:S<A<i>": []}')


def test_set_order_in_document():
    with pytest.raises(SetOrderError) as ei:
        tjson.parse_document('{"o:O": {"ids:S<i>": ["3", "1", "2"]}}')
    assert ei.value.path == ("o", "ids", 1)


def test_nested_generics():
    doc = tjson.parse_document('{"s:S<A<i>>": [["1", "2"], ["3"]]}')
    assert doc["s"].type == SetType(ArrayType(INTEGER))
    with pytest.raises(SetOrderError):
        tjson.parse_document('{"s:S<A<i>>": [["3"], ["1", "2"]]}')


def test_codec_depth_limit():
    codec = Codec(max_depth=2)
    codec.parse('{"a:A<A<i>>": []}')
    with pytest.raises(TagSyntaxError):
        codec.parse('{"a:A<A<A<i>>>": []}')
    with pytest.raises(TagSyntaxError):
        codec.parse_tag("S<S<S<i>>>")


def test_codec_validate_and_serialize():
    codec = Codec()
    value = codec.validate(codec.parse_tag("S<s>"), ["a", "b"])
    assert codec.serialize(value) == ["a", "b"]


def test_bytes_input():
    doc = tjson.parse_document('{"s:s": "é"}'.encode('utf-8'))
    assert doc["s"].value == "é"


def test_document_mapping():
    doc = tjson.parse_document('{"a:i": "1", "b:s": "x"}')
    assert "a" in doc and len(doc) == 2
    assert doc.get("c") is None
    assert [k for k, _ in doc.items()] == ["a", "b"]
    assert doc.to_python() == {"a": 1, "b": "x"}


def test_errors_in_log(caplog):
    with caplog.at_level(logging.DEBUG, logger="tjsonlib.codec"):
        with pytest.raises(TypeMismatchError):
            tjson.parse_document('{"a:i": 1}')
    assert "Rejected document" in caplog.text


def test_content_type():
    assert tjson.codec.content_type == "application/tjson"


def test_root_shape_in_log(caplog):
    with caplog.at_level(logging.DEBUG, logger="tjsonlib.codec"):
        with pytest.raises(RootShapeError):
            tjson.parse_document('["1"]')
    assert "Rejected document" in caplog.text


def nested_objects(depth):
    return '{"a:O":' * depth + '{}' + '}' * depth


def test_nesting_limit():
    doc = tjson.parse_document(nested_objects(MAX_NESTING))
    assert tjson.write_document(doc) == nested_objects(MAX_NESTING).replace('{"a:O":', '{"a:O": ')


def test_deeply_nested_objects():
    with pytest.raises(FormatError) as ei:
        tjson.parse_document(nested_objects(600))
    assert ei.value.path == ("a",) * (MAX_NESTING + 1)
    assert "too deeply nested" in str(ei.value)


def test_deeply_nested_objects_on_write():
    root = Object()
    for _ in range(600):
        root = Object({"a": root})
    with pytest.raises(FormatError) as ei:
        tjson.write_document(root)
    assert ei.value.path == ("a",) * (MAX_NESTING + 1)


def test_chained_sets_on_write():
    root = Object()
    for _ in range(2000):
        root = Object({"s": Set(OBJECT, [root])})
    with pytest.raises(FormatError):
        tjson.write_document(root)


def test_big_integer_document():
    doc = tjson.parse_document('{"n:i": "' + "9" * 5000 + '"}')
    assert doc.to_python() == {"n": 10 ** 5000 - 1}
    assert doc["n"].as_int() == 10 ** 5000 - 1
    assert tjson.write_document(doc) == '{"n:i": "' + "9" * 5000 + '"}'
