from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Self

from jshape.jtype import JType


# A JShape is the set of shapes observed at one path. It's never mutated once built;
#  merge() always hands back a new one, children may be shared between (immutable) trees.
@dataclass(frozen=True)
class JShape:
    # discovery order, which is also the rendering order
    kinds: tuple[JType, ...] = ()
    nullable: bool = False
    # None: no list was ever seen here
    # JShape with no kinds: lists were seen, but never an element inside them
    element: Self | None = None
    fields: Mapping[str, Self] = field(default_factory=dict)

    # fields is a read-only view, which is not hashable
    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def empty(cls) -> Self:
        """
        :return: the shape of a slot where nothing was observed; the identity of merge()
        """
        return cls()

    @classmethod
    def of(cls, jtype: JType) -> Self:
        assert not jtype.is_composite()
        return cls(kinds=(jtype,))

    @classmethod
    def array(cls, element: Self | None = None) -> Self:
        return cls(kinds=(JType.ARRAY,), element=element if element is not None else cls.empty())

    @classmethod
    def object(cls, fields: Mapping[str, Self] | None = None) -> Self:
        return cls(kinds=(JType.OBJECT,), fields=fields or {})

    @property
    def is_empty(self) -> bool:
        return not self.kinds


def _merge_element(x: JShape | None, y: JShape | None) -> JShape | None:
    if x is None:
        return y
    if y is None:
        return x
    return merge(x, y)


def normalize(shape: JShape) -> JShape:
    """
    Apply the absorption rules, in this order:
    - float absorbs int
    - null next to any other kind collapses into the nullable flag
    :return: a new, normalized JShape; normalizing twice is a no-op
    """
    kinds = list(shape.kinds)
    nullable = shape.nullable
    if JType.NUMBER in kinds and JType.INTEGER in kinds:
        kinds.remove(JType.INTEGER)

    if JType.NULL in kinds and len(kinds) > 1:
        kinds.remove(JType.NULL)
        nullable = True

    return replace(shape, kinds=tuple(kinds), nullable=nullable)


def merge(x: JShape, y: JShape) -> JShape:
    """
    Unify two observations of the same path. Pure; neither operand is touched.
    Kinds keep x's discovery order, followed by whatever y adds.
    """
    kinds = list(x.kinds)
    for jtype in y.kinds:
        if jtype not in kinds:
            kinds.append(jtype)

    fields: dict[str, JShape] = dict(x.fields)
    for key, shape in y.fields.items():
        if key in fields:
            fields[key] = merge(fields[key], shape)
            continue
        fields[key] = shape

    return normalize(JShape(
        kinds=tuple(kinds),
        nullable=x.nullable or y.nullable,
        element=_merge_element(x.element, y.element),
        fields=fields
    ))
