import enum
import math
import pathlib
import typing

from baclib import json


package_path: pathlib.Path = pathlib.Path(__file__).parent
"""Package file system path"""

json_schema_repo: json.SchemaRepository = json.SchemaRepository(
    package_path / 'schemas')
"""JSON schema repository"""


class Kind(enum.Enum):
    ENUMERATED = 'Enumerated'
    BIT_STRING = 'BitString'
    OCTET_STRING = 'OctetString'
    CHARACTER_STRING = 'CharacterString'
    UNSIGNED = 'Unsigned'
    INTEGER = 'Integer'
    REAL = 'Real'
    DOUBLE = 'Double'
    ANY = 'Any'
    CHOICE = 'CHOICE'
    SEQUENCE = 'SEQUENCE'


simple_kinds: typing.FrozenSet[Kind] = frozenset([Kind.ENUMERATED,
                                                  Kind.BIT_STRING])
"""Kinds with items in form ``name (number)``"""

complex_kinds: typing.FrozenSet[Kind] = frozenset([Kind.CHOICE,
                                                   Kind.SEQUENCE])
"""Kinds with items in form ``name [tag] Type OPTIONAL``"""


def get_kind(type_name: typing.Optional[str]) -> typing.Optional[Kind]:
    """Get kind of raw type name or ``None`` for type references"""
    try:
        return Kind(type_name)
    except ValueError:
        return None


Number = typing.Union[int, float]
"""Constraint bound (``-math.inf`` for MIN and ``math.inf`` for MAX)"""


class Range(typing.NamedTuple):
    min: Number
    max: Number


class Item(typing.NamedTuple):
    """Named entry of a structured definition

    Enumeration values and bits only have `name`, `number` and `comment`.
    Choice options and sequence fields additionally carry a type shape
    and use `number` as context tag.

    """
    name: str
    number: typing.Optional[int] = None
    optional: bool = False
    type: typing.Optional[str] = None
    series: typing.Union[None, bool, int] = None
    size: typing.Optional[Range] = None
    range: typing.Optional[Range] = None
    items: typing.Optional[typing.List['Item']] = None
    extensible: bool = False
    comment: typing.Optional[str] = None


class Definition(typing.NamedTuple):
    """Top level definition ``Name ::= [APPLICATION n] Type``"""
    name: str
    type: str
    primitive: typing.Optional[int] = None
    series: typing.Union[None, bool, int] = None
    size: typing.Optional[Range] = None
    range: typing.Optional[Range] = None
    items: typing.Optional[typing.List[Item]] = None
    extensible: bool = False
    comment: typing.Optional[str] = None


Shape = typing.Union[Definition, Item]
"""Anything carrying type, series, size, range, items and extensible"""


class ParseError(Exception):
    """Positioned parse failure

    Args:
        message: error description
        content: line ending normalized source text
        offset: character offset in `content`

    """

    def __init__(self, message: str, content: str, offset: int):
        self.message = message
        self.offset = offset
        self.line = content.count('\n', 0, offset) + 1
        super().__init__(f'{message} (line {self.line})')


class EncodingError(ParseError):
    """Source contains characters other than tab, newline or printable
    ASCII"""


class MatchError(ParseError):
    """Expected literal or pattern not found"""


class RangeError(ParseError):
    """Constraint low bound is greater than high bound"""


class ItemsError(ParseError):
    """Item list on type that can not have items"""


def bound_to_json(value: Number) -> typing.Union[Number, str]:
    if value == -math.inf:
        return 'MIN'
    if value == math.inf:
        return 'MAX'
    return value


def bound_from_json(value: typing.Union[Number, str]) -> Number:
    if value == 'MIN':
        return -math.inf
    if value == 'MAX':
        return math.inf
    return value


def definition_to_json(definition: Shape) -> json.Data:
    """Represent raw definition or item as JSON data

    Properties with default values are omitted.

    """
    data = {}
    for key, value in definition._asdict().items():
        if value is None or value is False:
            continue
        if key in ('size', 'range'):
            value = {'min': bound_to_json(value.min),
                     'max': bound_to_json(value.max)}
        elif key == 'items':
            value = [definition_to_json(i) for i in value]
        data[key] = value
    return data


def definition_from_json(data: json.Data) -> Definition:
    """Create raw definition from JSON data"""
    return Definition(**_shape_from_json(data))


def _item_from_json(data):
    return Item(**_shape_from_json(data))


def _shape_from_json(data):
    data = dict(data)
    for key in ('size', 'range'):
        if key in data:
            data[key] = Range(bound_from_json(data[key]['min']),
                              bound_from_json(data[key]['max']))
    if 'items' in data:
        data['items'] = [_item_from_json(i) for i in data['items']]
    return data
