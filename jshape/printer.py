import sys
from typing import Iterator, TextIO

from jshape.jtype import JType
from jshape.shape import JShape

ARRAY_NOTATION = "[]"
PATH_SEPARATOR = "."


def _expand(shape: JShape, prefix: str) -> list[str | tuple[JShape, str]]:
    """
    One level of rendering: finished lines for the leaves, (shape, prefix) pairs for what's left to walk.
    """
    nullable = "nullable " if shape.nullable else ""
    out: list[str | tuple[JShape, str]] = []
    for jtype in shape.kinds:
        match jtype:
            case JType.ARRAY:
                if shape.element is None or shape.element.is_empty:
                    out.append(f"{prefix}{ARRAY_NOTATION}")
                    continue
                out.append((shape.element, prefix + ARRAY_NOTATION))
            case JType.OBJECT:
                # an object without keys renders nothing at all
                for key in sorted(shape.fields):
                    out.append((shape.fields[key], f"{prefix}{PATH_SEPARATOR}{key}"))
            case JType.NULL:
                out.append(f"{prefix}{jtype}")
            case _:
                out.append(f"{prefix}({nullable}{jtype})")
    return out


def render(shape: JShape, prefix: str = "") -> Iterator[str]:
    """
    Depth-first walk of a finished shape, one line per observed type at every path:
        .users[].name(string)
        .users[].age(nullable int)
        .tags[]
        .deleted<nil>
    Kinds come out in discovery order, object keys sorted.
    The walk keeps its own stack, so nesting depth is not bound by the interpreter's recursion limit.
    """
    stack: list[str | tuple[JShape, str]] = [(shape, prefix)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            yield item
            continue
        stack.extend(reversed(_expand(*item)))


def print_shape(shape: JShape, out: TextIO | None = None, prefix: str = "") -> int:
    """
    :param out: defaults to stdout
    :return: the number of lines written
    """
    out = out if out is not None else sys.stdout
    lines = 0
    for line in render(shape, prefix):
        print(line, file=out)
        lines += 1
    return lines
