import enum
import logging
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator, Self

import ijson

from jshape.errors import JDecodeError, JStructureError
from jshape.jtype import JTypePrimitiveCandidate

logger = logging.getLogger(__name__)


class JTokenKind(enum.Enum):
    ARRAY_OPEN = "["
    ARRAY_CLOSE = "]"
    OBJECT_OPEN = "{"
    OBJECT_CLOSE = "}"
    KEY = "key"
    SCALAR = "scalar"

    def is_close(self) -> bool:
        return self in (JTokenKind.ARRAY_CLOSE, JTokenKind.OBJECT_CLOSE)


@dataclass(frozen=True)
class JToken:
    kind: JTokenKind
    value: JTypePrimitiveCandidate = None

    @classmethod
    def key(cls, name: str) -> Self:
        return cls(JTokenKind.KEY, name)

    @classmethod
    def scalar(cls, value: JTypePrimitiveCandidate) -> Self:
        return cls(JTokenKind.SCALAR, value)

    def __str__(self) -> str:
        if self.kind in (JTokenKind.KEY, JTokenKind.SCALAR):
            return f"{self.kind.value} {self.value!r}"
        return repr(self.kind.value)


ARRAY_OPEN = JToken(JTokenKind.ARRAY_OPEN)
ARRAY_CLOSE = JToken(JTokenKind.ARRAY_CLOSE)
OBJECT_OPEN = JToken(JTokenKind.OBJECT_OPEN)
OBJECT_CLOSE = JToken(JTokenKind.OBJECT_CLOSE)

# ijson basic_parse event -> token; everything not listed here is a scalar
_EVENT_TOKENS: dict[str, JToken] = {
    "start_array": ARRAY_OPEN,
    "end_array": ARRAY_CLOSE,
    "start_map": OBJECT_OPEN,
    "end_map": OBJECT_CLOSE,
}


def tokens_from_events(events: Iterable[tuple[str, object]]) -> Iterator[JToken]:
    """
    Translate (event, value) pairs as produced by ijson.basic_parse.
    """
    for event, value in events:
        if event in _EVENT_TOKENS:
            yield _EVENT_TOKENS[event]
            continue
        if event == "map_key":
            yield JToken.key(value)
            continue
        yield JToken.scalar(value)


class JTokenStream:
    """
    One-token lookahead over a sequence of JTokens.
    Tokenizer failures surface as JDecodeError on the read that hit them,
    and so does a compressed stream that is truncated or corrupt.
    """
    __END = object()

    def __init__(self, tokens: Iterable[JToken]):
        self.__tokens: Iterator[JToken] = iter(tokens)
        self.__lookahead: JToken | object | None = None
        self.__consumed: int = 0

    @classmethod
    def from_file(cls, f: BinaryIO, multiple_values: bool = False) -> Self:
        """
        Tokenize a binary json stream lazily with ijson.
        Numbers are kept exact (int or Decimal) so they can be classified by value.
        :param multiple_values: accept any number of concatenated documents
        """
        events = ijson.basic_parse(f, use_float=False, multiple_values=multiple_values)
        return cls(tokens_from_events(events))

    @property
    def consumed(self) -> int:
        """
        :return: the number of tokens handed out by next() so far
        """
        return self.__consumed

    def __pull(self) -> JToken | object:
        try:
            return next(self.__tokens, JTokenStream.__END)
        except (ijson.JSONError, UnicodeDecodeError, EOFError, zlib.error) as e:
            raise JDecodeError(f"{e} (after {self.__consumed} tokens)") from e

    def peek(self) -> JToken | None:
        """
        :return: the next token without consuming it, None at the end of input
        """
        if self.__lookahead is None:
            self.__lookahead = self.__pull()
        if self.__lookahead is JTokenStream.__END:
            return None
        return self.__lookahead

    def next(self) -> JToken:
        """
        :raises JStructureError: at the end of input
        """
        token = self.peek()
        if token is None:
            raise JStructureError("a token", "end of input")
        self.__lookahead = None
        self.__consumed += 1
        return token

    def has_more(self) -> bool:
        """
        To be called at the top of an array/object body.
        :return: whether another element (or key) follows before the closing delimiter
        """
        token = self.peek()
        return token is not None and not token.kind.is_close()

    def exhausted(self) -> bool:
        return self.peek() is None
