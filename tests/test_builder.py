import io

import pytest

from jshape import JShape, JStructureError, JTrailingDataError, JToken, JTokenKind, JTokenStream, JType, build_documents, build_value, parse
from jshape.builder import MAX_DEPTH
from jshape.tokens import ARRAY_CLOSE, ARRAY_OPEN, OBJECT_CLOSE, OBJECT_OPEN


def parse_text(document: str, multiple_documents: bool = False) -> JShape:
    return parse(io.BytesIO(document.encode("utf-8")), multiple_documents=multiple_documents)


@pytest.mark.parametrize("document, expected", [
    ("true", JType.BOOLEAN),
    ("null", JType.NULL),
    ('"x"', JType.STRING),
    ("1", JType.INTEGER),
    ("2.0", JType.INTEGER),
    ("1e10", JType.INTEGER),
    ("123456789012345678901234567890", JType.INTEGER),
    ("2.5", JType.NUMBER),
])
def test_scalars(document, expected):
    shape = parse_text(document)
    assert shape.kinds == (expected,)
    assert not shape.nullable


def test_empty_array():
    shape = parse_text("[]")
    assert shape.kinds == (JType.ARRAY,)
    assert shape.element is not None
    assert shape.element.is_empty


def test_empty_object():
    shape = parse_text("{}")
    assert shape.kinds == (JType.OBJECT,)
    assert dict(shape.fields) == {}


def test_array_elements_are_folded():
    shape = parse_text('[1, "a", null, 2.5, [], {"k": 1}]')
    assert shape.element.kinds == (JType.STRING, JType.NUMBER, JType.ARRAY, JType.OBJECT)
    assert shape.element.nullable
    assert shape.element.element.is_empty
    assert shape.element.fields["k"].kinds == (JType.INTEGER,)


def test_nested_arrays():
    shape = parse_text("[[1], [2.5], []]")
    assert shape.element.kinds == (JType.ARRAY,)
    assert shape.element.element.kinds == (JType.NUMBER,)


def test_duplicate_keys_merge():
    shape = parse_text('{"k": 1, "k": "x"}')
    assert shape.fields["k"].kinds == (JType.INTEGER, JType.STRING)


def test_trailing_tokens():
    tokens = JTokenStream([JToken.scalar(1), JToken.scalar(2)])
    assert build_value(tokens).kinds == (JType.INTEGER,)
    assert not tokens.exhausted()


def test_multiple_documents():
    shape = parse_text('{"a": 1}\n{"a": null, "b": []}\n{"a": 2.5}', multiple_documents=True)
    assert shape.kinds == (JType.OBJECT,)
    assert shape.fields["a"].kinds == (JType.NUMBER,)
    assert shape.fields["a"].nullable
    assert shape.fields["b"].element.is_empty


def test_no_documents():
    assert build_documents(JTokenStream([])).is_empty


def test_wrong_close_delimiter():
    tokens = JTokenStream([ARRAY_OPEN, JToken.scalar(1), OBJECT_CLOSE])
    with pytest.raises(JStructureError) as e:
        build_value(tokens)
    assert e.value.expected == "']'"
    assert e.value.found == OBJECT_CLOSE


def test_non_string_key():
    tokens = JTokenStream([OBJECT_OPEN, JToken.scalar(1), JToken.scalar(2), OBJECT_CLOSE])
    with pytest.raises(JStructureError) as e:
        build_value(tokens)
    assert e.value.expected == "a key"


def test_close_at_value_position():
    with pytest.raises(JStructureError) as e:
        build_value(JTokenStream([ARRAY_CLOSE]))
    assert e.value.expected == "a value"


def test_key_at_value_position():
    tokens = JTokenStream([OBJECT_OPEN, JToken.key("a"), JToken.key("b"), OBJECT_CLOSE])
    with pytest.raises(JStructureError):
        build_value(tokens)


def test_unterminated_container():
    with pytest.raises(JStructureError) as e:
        build_value(JTokenStream([OBJECT_OPEN, JToken.key("a"), JToken.scalar(1)]))
    assert e.value.found == "end of input"


def test_second_document_without_multiple_documents():
    with pytest.raises(JTrailingDataError) as e:
        parse_text('{"a": 1}\n{"a": 2}')
    assert e.value.expected == "end of input"
    assert e.value.found == JToken(JTokenKind.OBJECT_OPEN)


def test_nesting_up_to_max_depth():
    shape = parse_text("[" * MAX_DEPTH + "]" * MAX_DEPTH)
    depth = 0
    while shape.element is not None:
        shape = shape.element
        depth += 1
    assert depth == MAX_DEPTH


def test_deeply_nested_merge():
    document = '{"a": ' * 3000 + "1" + "}" * 3000
    shape = parse_text(f"[{document}, {document.replace('1', '2.5')}]")
    for _ in range(3001):
        shape = shape.fields["a"] if shape.fields else shape.element
    assert shape.kinds == (JType.NUMBER,)


def test_nesting_past_max_depth():
    tokens = JTokenStream([OBJECT_OPEN] + [JToken.key("a"), OBJECT_OPEN] * MAX_DEPTH)
    with pytest.raises(JStructureError) as e:
        build_value(tokens)
    assert e.value.expected == f"at most {MAX_DEPTH} levels of nesting"
    assert e.value.found == OBJECT_OPEN
