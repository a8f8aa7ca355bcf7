"""BACnet ASN.1 definition parser

Parsed grammar::

    Definition  = Name '::=' ['[' 'APPLICATION' Int ']'] TypeExpr
    TypeExpr    = ['SEQUENCE' ['SIZE' '(' Int ')'] 'OF'] BaseType
                  [['('] 'SIZE' Constraint [')']] [Constraint] [ItemList]
    ItemList    = '{' Item (',' Item)* [',' '...'] '}'
    Item        = LowerName ('(' Int ')' |
                             ['[' Int ']'] TypeExpr ['OPTIONAL'])
    Constraint  = '(' Bound ['..' Bound] ')'
    Bound       = 'MIN' | 'MAX' | Number

Comments start with ``--`` and extend to the end of line.

"""

import logging
import math
import pathlib
import re
import typing

from baclib.asn1 import common
from baclib.asn1.cursor import Cursor


mlog: logging.Logger = logging.getLogger(__name__)
"""Module logger"""

_invalid_char = re.compile(r'[^\t\n\x20-\x7E]')
_header = re.compile(
    r'([A-Z][0-9A-Za-z]*(?:-[A-Z][0-9A-Za-z]*)*)\s*::=')
_application = re.compile(r'\[\s*APPLICATION\s+(\d+)\s*\]')
_series = re.compile(r'SEQUENCE\s*(?:SIZE\s*\(\s*(\d+)\s*\)\s*)?OF\b')
_any = 'ABSTRACT-SYNTAX.&Type'
_enumerated = re.compile(r'ENUMERATED\b')
_bit_string = re.compile(r'BIT\s+STRING\b')
_octet_string = re.compile(r'OCTET\s+STRING\b')
_type_name = re.compile(r'[A-Z][0-9A-Za-z]*(?:-[A-Z][0-9A-Za-z]*)*')
_size = re.compile(r'\(?\s*SIZE\b')
_bound = r'MIN|MAX|[+-]?\d+(?:\.\d+)?'
_constraint = re.compile(
    rf'\(\s*({_bound})\s*(?:\.\.\s*({_bound})\s*)?\)')
_item_name = re.compile(r'[a-z][0-9a-z]*(?:-[0-9a-z]+)*')
_item_number = re.compile(r'\(\s*(\d+)\s*\)')
_context_tag = re.compile(r'\[\s*(\d+)\s*\]')
_optional = re.compile(r'OPTIONAL\b')


def parse(content: str) -> typing.List[common.Definition]:
    """Parse ASN.1 definitions

    Line endings are normalized to ``'\\n'`` before parsing and error line
    numbers refer to normalized content.

    Raises:
        TypeError: `content` is not a string
        common.ParseError: invalid content

    """
    if not isinstance(content, str):
        raise TypeError(f'expected str, got {type(content).__name__}')

    content = content.replace('\r\n', '\n').replace('\r', '\n')

    invalid = _invalid_char.search(content)
    if invalid:
        raise common.EncodingError('invalid characters in content',
                                   content, invalid.start())

    cursor = Cursor(content)
    definitions = []
    while True:
        skip = cursor.skip()
        if not skip.more:
            break
        definitions.append(_parse_definition(cursor, skip.comment))

    mlog.debug('parsed %s definitions', len(definitions))
    return definitions


def parse_file(path: pathlib.PurePath) -> typing.List[common.Definition]:
    """Parse ASN.1 definitions from UTF-8 encoded file"""
    mlog.debug('parsing %s', path)
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return parse(f.read())


def _parse_definition(cursor, comment):
    header = cursor.require_match(_header)
    name = header.value.group(1)

    primitive = cursor.try_match(_application,
                                 lambda match: int(match.group(1)))

    shape = _parse_type(cursor)
    if shape.get('comment') is None:
        shape['comment'] = comment

    return common.Definition(
        name=name,
        primitive=primitive.value if primitive else None,
        **shape)


def _parse_type(cursor):
    shape = {}

    series = cursor.try_match(
        _series, lambda match: int(match.group(1)) if match.group(1) else True)
    if series:
        shape['series'] = series.value

    base = (cursor.try_match(_any, common.Kind.ANY.value) or
            cursor.try_match(_enumerated, common.Kind.ENUMERATED.value) or
            cursor.try_match(_bit_string, common.Kind.BIT_STRING.value) or
            cursor.try_match(_octet_string, common.Kind.OCTET_STRING.value) or
            cursor.require_match(_type_name, lambda match: match.group()))
    shape['type'] = base.value

    size = cursor.try_match(_size)
    if size:
        shape['size'] = _parse_constraint(cursor, True)
        if size.value.group().startswith('('):
            cursor.require_match(')')

    value_range = _parse_constraint(cursor, False)
    if value_range:
        shape['range'] = value_range

    shape.update(_parse_items(cursor, shape['type']))
    return shape


def _parse_constraint(cursor, is_size):
    match = (cursor.require_match(_constraint) if is_size
             else cursor.try_match(_constraint))
    if not match:
        return

    low = _parse_bound(match.value.group(1))
    high = (_parse_bound(match.value.group(2)) if match.value.group(2)
            else low)
    if low > high:
        raise cursor.error(
            common.RangeError,
            f'invalid range: minimum ({common.bound_to_json(low)}) is '
            f'greater than maximum ({common.bound_to_json(high)})',
            match.offset)

    return common.Range(low, high)


def _parse_bound(bound):
    if bound == 'MIN':
        return -math.inf
    if bound == 'MAX':
        return math.inf
    if '.' in bound:
        return float(bound)
    return int(bound)


def _parse_items(cursor, type_name):
    if not cursor.try_match('{'):
        return {}

    kind = common.get_kind(type_name)
    if kind not in common.simple_kinds and kind not in common.complex_kinds:
        raise cursor.error(common.ItemsError,
                           f"type '{type_name}' cannot have items")

    items = []
    extensible = False
    while True:
        skip = cursor.skip()
        if not skip.more:
            break

        name = cursor.require_match(_item_name)
        item = {'name': name.value.group(),
                'comment': skip.comment}

        if kind in common.simple_kinds:
            item['number'] = cursor.require_match(
                _item_number, lambda match: int(match.group(1))).value

        else:
            tag = cursor.try_match(_context_tag,
                                   lambda match: int(match.group(1)))
            if tag:
                item['number'] = tag.value

            shape = _parse_type(cursor)
            if shape.get('comment') is None:
                shape['comment'] = item['comment']
            item.update(shape)

            if cursor.try_match(_optional):
                item['optional'] = True

        items.append(common.Item(**item))

        if not cursor.try_match(','):
            break

        if kind != common.Kind.SEQUENCE and cursor.try_match('...'):
            extensible = True
            break

    closing = cursor.require_match('}')

    result = {'items': items,
              'comment': closing.comment}
    if extensible:
        result['extensible'] = True
    return result
