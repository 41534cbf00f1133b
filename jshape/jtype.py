import enum
import types
from decimal import Decimal
from typing import TypeAlias, Self

JTypePrimitiveCandidate: TypeAlias = types.NoneType | str | bool | int | float | Decimal


class JTypeDoesNotExist(Exception):
    pass


class JType(enum.Enum):
    """
    The type tags a path can carry. A tag's value is the python type the decoded
    json value has (numbers aside, see of()); str() is the name it's printed with.
    """
    ARRAY = list
    OBJECT = dict
    BOOLEAN = bool
    INTEGER = int
    NUMBER = float
    STRING = str
    NULL = types.NoneType

    def is_composite(self) -> bool:
        return self in (JType.ARRAY, JType.OBJECT)

    def __str__(self) -> str:
        return _LABELS[self]

    @classmethod
    def of(cls, value: JTypePrimitiveCandidate) -> Self:
        """
        Classify a decoded scalar.
        Numbers are classified by value, not by how they were written: 2.0 and 1e10 are integers.
        :raises JTypeDoesNotExist: if value is not a json scalar
        """
        if isinstance(value, Decimal):
            if value.is_finite() and value == value.to_integral_value():
                return cls.INTEGER
            return cls.NUMBER
        if isinstance(value, float):
            return cls.INTEGER if value.is_integer() else cls.NUMBER
        # exact type, bool would pass for an int otherwise
        if type(value) in _SCALARS:
            return _SCALARS[type(value)]

        raise JTypeDoesNotExist(value, type(value))


_LABELS: dict[JType, str] = {
    JType.ARRAY: "list",
    JType.OBJECT: "dict",
    JType.BOOLEAN: "bool",
    JType.INTEGER: "int",
    JType.NUMBER: "float",
    JType.STRING: "string",
    JType.NULL: "<nil>",
}

_SCALARS: dict[type, JType] = {jtype.value: jtype for jtype in JType if not jtype.is_composite()}
