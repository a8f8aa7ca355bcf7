"""Normalization of parsed definitions

Normalized definition is JSON data::

    {'alias': 'BACnetObjectType',
     'name': 'object-type',
     'type': {'base': 'enumerated',
              'values': [{'alias': 'analog-input',
                          'name': 'analog-input',
                          'constant': 0}, ...],
              'extensible': True,
              'range': {'minimum': 0, 'maximum': 1024},
              'standard': {'from': 0, 'to': 127},
              'proprietary': {'from': 128, 'to': 1023}}}

Type without additional constraints is represented only by normalized name
of referenced type (e.g. ``'unsigned'``).

"""

import logging
import math
import re
import typing

from baclib import json
from baclib.asn1 import common
from baclib.asn1.naming import to_name
from baclib.asn1.registry import Registry
from baclib.asn1.wellknown import WellKnown, default_well_known


mlog: logging.Logger = logging.getLogger(__name__)
"""Module logger"""

unspecified_proprietary: json.Data = {'from': 1, 'to': 0}
"""Proprietary span of extensible enumeration without documented split"""

max_context: int = 254
"""Maximum valid context tag number"""

_reserved_sentence = re.compile(
    r'values\s+(\d+)\s*-\s*(\d+)\s+are\s+reserved\s+for\s+definition\s+by\s+'
    r'ASHRAE\.\s*(?:\w+\s+)*?values\s+(\d+)\s*-\s*(\d+)\s+may\s+be\s+used\s+'
    r'by\s+others')


def normalize(definition: common.Definition,
              registry: typing.Optional[Registry] = None,
              well_known: typing.Optional[WellKnown] = None
              ) -> json.Data:
    """Normalize parsed definition

    Predefined record found in `registry` by original or normalized
    definition name is returned instead of newly normalized definition.

    """
    name = to_name(definition.name, False)

    if registry is not None:
        predefined = registry.get(definition.name) or registry.get(name)
        if predefined is not None:
            mlog.debug('using predefined %s', definition.name)
            return predefined

    result = {'alias': definition.name,
              'name': name}
    if definition.primitive is not None:
        result['primitive'] = definition.primitive
    if definition.comment:
        result['comment'] = definition.comment
    result['type'] = normalize_type(
        definition,
        well_known if well_known is not None else default_well_known)
    return result


def normalize_all(definitions: typing.Iterable[common.Definition],
                  registry: typing.Optional[Registry] = None,
                  well_known: typing.Optional[WellKnown] = None
                  ) -> typing.Iterator[json.Data]:
    """Lazily normalize definitions"""
    for definition in definitions:
        yield normalize(definition, registry, well_known)


def normalize_type(shape: common.Shape,
                   well_known: WellKnown = default_well_known
                   ) -> json.Data:
    """Normalize type of definition or item

    Type without constraints, items or series (including opaque references
    to other definitions) is represented only by its normalized name
    (e.g. ``'date-time'``). Otherwise, result is object with normalized
    name under ``'base'`` key.

    """
    kind = common.get_kind(shape.type)
    enricher = _enrichers[kind]
    t = enricher(shape, well_known)

    if shape.series is not None and shape.series is not False:
        if not isinstance(t, dict):
            t = {'base': t}
        t['series'] = shape.series

    return t


def _opaque(shape, well_known):
    return to_name(shape.type, False)


def _numeric(shape, well_known):
    if shape.range is None:
        return _opaque(shape, well_known)

    return {'base': to_name(shape.type, False),
            'minimum': _bound(shape.range.min),
            'maximum': _bound(shape.range.max)}


def _string(shape, well_known):
    if shape.size is None:
        return _opaque(shape, well_known)

    return {'base': to_name(shape.type, False),
            'length': _length(shape.size.min, shape.size.max)}


def _bit_string(shape, well_known):
    if not shape.items:
        return _opaque(shape, well_known)

    bits = [{'alias': i.name,
             'name': to_name(i.name),
             'position': i.number}
            for i in sorted(shape.items, key=lambda i: i.number)]
    length = max(i.number for i in shape.items) + 1

    t = {'base': 'bit-string',
         'bits': bits,
         'extensible': shape.extensible,
         'length': length}

    special = well_known.bit_string.get(shape.name)
    if special:
        t['length'] = {'minimum': length,
                       'maximum': special['maximum']}
        if 'proprietary' in special:
            t['proprietary'] = dict(special['proprietary'])

    return t


def _enumerated(shape, well_known):
    if not shape.items:
        return _opaque(shape, well_known)

    values = [{'alias': i.name,
               'name': to_name(i.name),
               'constant': i.number}
              for i in sorted(shape.items, key=lambda i: i.number)]
    minimum = min(i.number for i in shape.items)
    maximum = max(i.number for i in shape.items) + 1

    t = {'base': 'enumerated',
         'values': values,
         'extensible': shape.extensible,
         'range': {'minimum': minimum,
                   'maximum': maximum}}

    special = well_known.enumerated.get(shape.name)
    if special:
        t['extensible'] = True
        t['range'] = dict(special['range'])
        for key in ('standard', 'proprietary'):
            if key in special:
                t[key] = dict(special[key])
        return t

    if not shape.extensible:
        return t

    spans = _get_reserved_spans(shape)
    if not spans:
        mlog.debug('extensible %s without documented proprietary values',
                   shape.name)
        t['proprietary'] = dict(unspecified_proprietary)
        return t

    standard, proprietary = spans
    t['standard'] = standard
    t['proprietary'] = proprietary
    return t


def _choice(shape, well_known):
    options = []
    for item in shape.items or []:
        option = {'alias': item.name,
                  'name': to_name(item.name),
                  'type': normalize_type(item, well_known)}
        if _is_valid_context(item.number):
            option['context'] = item.number
        if item.comment:
            option['comment'] = item.comment
        options.append(option)

    return {'base': 'choice',
            'options': options}


def _sequence(shape, well_known):
    fields = []
    for item in shape.items or []:
        field = {'alias': item.name,
                 'name': to_name(item.name),
                 'type': normalize_type(item, well_known)}
        if _is_valid_context(item.number):
            field['context'] = item.number
        field['optional'] = item.optional
        if item.comment:
            field['comment'] = item.comment
        fields.append(field)

    return {'base': 'sequence',
            'fields': fields}


_enrichers = {
    None: _opaque,
    common.Kind.ANY: _opaque,
    common.Kind.UNSIGNED: _numeric,
    common.Kind.INTEGER: _numeric,
    common.Kind.REAL: _numeric,
    common.Kind.DOUBLE: _numeric,
    common.Kind.OCTET_STRING: _string,
    common.Kind.CHARACTER_STRING: _string,
    common.Kind.BIT_STRING: _bit_string,
    common.Kind.ENUMERATED: _enumerated,
    common.Kind.CHOICE: _choice,
    common.Kind.SEQUENCE: _sequence}


def _get_reserved_spans(shape):
    comments = [shape.comment, *(i.comment for i in shape.items)]
    text = ' '.join(i for i in comments if i)
    match = _reserved_sentence.search(text)
    if not match:
        return

    low1, high1, low2, high2 = (int(i) for i in match.groups())
    if low1 > high1 or low2 > high2:
        return

    return {'from': low1, 'to': high1}, {'from': low2, 'to': high2}


def _is_valid_context(number):
    return (isinstance(number, int) and
            not isinstance(number, bool) and
            0 <= number <= max_context)


def _length(minimum, maximum):
    if minimum == maximum:
        return _bound(minimum)
    return {'minimum': _bound(minimum),
            'maximum': _bound(maximum)}


def _bound(value):
    if math.isinf(value):
        return common.bound_to_json(value)
    return value
