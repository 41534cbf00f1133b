import contextlib
import logging
import sys
from typing import BinaryIO, Iterator

from jshape.errors import JStructureError, JTrailingDataError
from jshape.jtype import JType
from jshape.shape import JShape, merge
from jshape.tokens import JTokenKind, JTokenStream, ARRAY_CLOSE, OBJECT_CLOSE, JToken

logger = logging.getLogger(__name__)

# same nesting limit as go's encoding/json
MAX_DEPTH = 10_000
# two frames per level while building, two more per level while merging the deepest element
_RECURSION_LIMIT = 3 * MAX_DEPTH + 1_000


@contextlib.contextmanager
def _recursion_limit(limit: int) -> Iterator[None]:
    previous = sys.getrecursionlimit()
    if previous >= limit:
        yield
        return

    sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def build_value(tokens: JTokenStream) -> JShape:
    """
    Consume exactly one json value from the stream and build its shape.
    :raises JStructureError: on a token that can't start a value, a mismatched closing delimiter,
     or nesting deeper than MAX_DEPTH
    :raises JDecodeError: if the tokenizer fails underneath us
    """
    with _recursion_limit(_RECURSION_LIMIT):
        return _build(tokens, 0)


def _build(tokens: JTokenStream, depth: int) -> JShape:
    token = tokens.next()
    match token.kind:
        case JTokenKind.SCALAR:
            return JShape.of(JType.of(token.value))
        case JTokenKind.ARRAY_OPEN | JTokenKind.OBJECT_OPEN if depth >= MAX_DEPTH:
            raise JStructureError(f"at most {MAX_DEPTH} levels of nesting", token)
        case JTokenKind.ARRAY_OPEN:
            return _build_array(tokens, depth + 1)
        case JTokenKind.OBJECT_OPEN:
            return _build_object(tokens, depth + 1)

    raise JStructureError("a value", token)


def _build_array(tokens: JTokenStream, depth: int) -> JShape:
    element = JShape.empty()
    while tokens.has_more():
        element = merge(element, _build(tokens, depth))

    _expect_end(tokens, ARRAY_CLOSE)
    return JShape.array(element)


def _build_object(tokens: JTokenStream, depth: int) -> JShape:
    fields: dict[str, JShape] = {}
    while tokens.has_more():
        token = tokens.next()
        if token.kind != JTokenKind.KEY or not isinstance(token.value, str):
            raise JStructureError("a key", token)

        name = token.value
        value = _build(tokens, depth)
        # a repeated key is another observation of the same path, not a replacement
        fields[name] = merge(fields[name], value) if name in fields else value

    _expect_end(tokens, OBJECT_CLOSE)
    return JShape.object(fields)


def _expect_end(tokens: JTokenStream, end: JToken) -> None:
    if tokens.exhausted():
        raise JStructureError(str(end), "end of input")
    token = tokens.next()
    if token != end:
        raise JStructureError(str(end), token)


def build_documents(tokens: JTokenStream) -> JShape:
    """
    Build every top-level value left in the stream and merge them all together.
    :return: the merged shape; an empty shape if there was nothing to read
    """
    shape = JShape.empty()
    documents = 0
    with _recursion_limit(_RECURSION_LIMIT):
        while not tokens.exhausted():
            shape = merge(shape, _build(tokens, 0))
            documents += 1

    logger.debug("merged %s documents (%s tokens)", documents, tokens.consumed)
    return shape


def parse(f: BinaryIO, multiple_documents: bool = False) -> JShape:
    """
    Infer the shape of a json stream.
    :param f: binary file-like object holding utf-8 json
    :param multiple_documents: accept (and merge) any number of concatenated documents
    :raises JTrailingDataError: if more than one document shows up without multiple_documents
    :raises JShapeError: on malformed input; nothing partial is ever returned
    """
    # tokenize as a sequence of documents either way, so a second document is told apart from garbage
    tokens = JTokenStream.from_file(f, multiple_values=True)
    if multiple_documents:
        return build_documents(tokens)

    shape = build_value(tokens)
    if not tokens.exhausted():
        raise JTrailingDataError(tokens.peek())

    logger.debug("built shape from %s tokens", tokens.consumed)
    return shape
