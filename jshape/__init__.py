from jshape.builder import build_documents, build_value, parse
from jshape.errors import JDecodeError, JShapeError, JStructureError, JTrailingDataError
from jshape.jtype import JType
from jshape.printer import print_shape, render
from jshape.shape import JShape, merge, normalize
from jshape.tokens import JToken, JTokenKind, JTokenStream

__version__ = "0.1.0"
