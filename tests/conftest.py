import io

import pytest

from jshape import JShape, parse, render


def signature(shape: JShape | None):
    """
    Order-insensitive view of a shape, for comparisons where discovery order doesn't matter.
    """
    if shape is None:
        return None
    return (
        frozenset(shape.kinds),
        shape.nullable,
        signature(shape.element),
        tuple((k, signature(v)) for k, v in sorted(shape.fields.items()))
    )


@pytest.fixture
def lines_of():
    def delegate(document: str, multiple_documents: bool = False) -> list[str]:
        shape = parse(io.BytesIO(document.encode("utf-8")), multiple_documents=multiple_documents)
        return list(render(shape))

    return delegate
