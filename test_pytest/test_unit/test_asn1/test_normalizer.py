import pytest

from baclib.asn1 import common
from baclib.asn1 import normalizer
from baclib.asn1 import parser
from baclib.asn1 import registry
from baclib.asn1 import wellknown


def normalize(asn1_def, **kwargs):
    definition, = parser.parse(asn1_def)
    return normalizer.normalize(definition, **kwargs)


def test_enumerated():
    result = normalize("Foo ::= ENUMERATED { b (1), a (0) }")
    assert result == {
        'alias': 'Foo',
        'name': 'foo',
        'type': {'base': 'enumerated',
                 'values': [{'alias': 'a', 'name': 'a', 'constant': 0},
                            {'alias': 'b', 'name': 'b', 'constant': 1}],
                 'extensible': False,
                 'range': {'minimum': 0, 'maximum': 2}}}


@pytest.mark.parametrize("asn1_def, t", [
    ("Bar ::= Unsigned (0..255)",
     {'base': 'unsigned', 'minimum': 0, 'maximum': 255}),

    ("Bar ::= Integer (MIN..-1)",
     {'base': 'integer', 'minimum': 'MIN', 'maximum': -1}),

    ("Bar ::= Real (0.5..MAX)",
     {'base': 'real', 'minimum': 0.5, 'maximum': 'MAX'}),

    ("Bar ::= Double (7)",
     {'base': 'double', 'minimum': 7, 'maximum': 7}),

    ("Bar ::= OCTET STRING (SIZE(6))",
     {'base': 'octet-string', 'length': 6}),

    ("Bar ::= CharacterString (SIZE(1..64))",
     {'base': 'character-string',
      'length': {'minimum': 1, 'maximum': 64}}),

    ("Bar ::= CharacterString (SIZE(0..MAX))",
     {'base': 'character-string',
      'length': {'minimum': 0, 'maximum': 'MAX'}}),

    ("Bar ::= Unsigned", 'unsigned'),
    ("Bar ::= CharacterString", 'character-string'),
    ("Bar ::= BIT STRING", 'bit-string'),
    ("Bar ::= ENUMERATED", 'enumerated'),
    ("Bar ::= ABSTRACT-SYNTAX.&Type", 'any'),
    ("Bar ::= BACnetDateTime", 'date-time'),
    ("Bar ::= Unsigned8", 'unsigned-8'),

    ("Bar ::= SEQUENCE OF BACnetDateTime",
     {'base': 'date-time', 'series': True}),

    ("Bar ::= SEQUENCE SIZE(3) OF Unsigned (0..10)",
     {'base': 'unsigned', 'minimum': 0, 'maximum': 10, 'series': 3})
])
def test_type(asn1_def, t):
    result = normalize(asn1_def)
    assert result == {'alias': 'Bar',
                      'name': 'bar',
                      'type': t}


def test_primitive_and_comment():
    result = normalize(r"""
        -- Date value
        Date ::= [APPLICATION 10] OCTET STRING (SIZE(4))
    """)
    assert result == {'alias': 'Date',
                      'name': 'date',
                      'primitive': 10,
                      'comment': 'Date value',
                      'type': {'base': 'octet-string', 'length': 4}}


def test_bit_string():
    result = normalize(r"""
        BACnetStatusFlags ::= BIT STRING {
            in-alarm (0),
            fault (1),
            out-of-service (3),
            overridden (2)
            }
    """)
    assert result == {
        'alias': 'BACnetStatusFlags',
        'name': 'status-flags',
        'type': {'base': 'bit-string',
                 'bits': [{'alias': 'in-alarm',
                           'name': 'in-alarm',
                           'position': 0},
                          {'alias': 'fault',
                           'name': 'fault',
                           'position': 1},
                          {'alias': 'overridden',
                           'name': 'overridden',
                           'position': 2},
                          {'alias': 'out-of-service',
                           'name': 'out-of-service',
                           'position': 3}],
                 'extensible': False,
                 'length': 4}}


def test_bit_string_length_from_highest_position():
    result = normalize("Flags ::= BIT STRING { a (0), b (9), ... }")
    assert result['type']['length'] == 10
    assert result['type']['extensible'] is True
    assert 'proprietary' not in result['type']


def test_well_known_bit_string():
    result = normalize(r"""
        BACnetAuditOperationFlags ::= BIT STRING {
            read (0),
            write (1),
            create (2),
            delete (3),
            ...
            }
    """)
    t = result['type']
    assert t['length'] == {'minimum': 4, 'maximum': 64}
    assert t['proprietary'] == {'from': 32, 'to': 63}


def test_well_known_enumerated():
    result = normalize(r"""
        BACnetObjectType ::= ENUMERATED {
            analog-input (0),
            analog-output (1),
            analog-value (2),
            ...
            }
    """)
    t = result['type']
    assert result['name'] == 'object-type'
    assert [i['constant'] for i in t['values']] == [0, 1, 2]
    assert t['extensible'] is True
    assert t['range'] == {'minimum': 0, 'maximum': 1024}
    assert t['standard'] == {'from': 0, 'to': 127}
    assert t['proprietary'] == {'from': 128, 'to': 1023}


def test_custom_well_known():
    well_known = wellknown.merge(
        wellknown.default_well_known,
        wellknown.WellKnown(
            enumerated={'Custom': {'range': {'minimum': 0, 'maximum': 16},
                                   'proprietary': {'from': 8, 'to': 15}}},
            bit_string={}))

    result = normalize("Custom ::= ENUMERATED { a (0), b (1) }",
                       well_known=well_known)
    assert result['type']['range'] == {'minimum': 0, 'maximum': 16}
    assert result['type']['proprietary'] == {'from': 8, 'to': 15}
    assert 'standard' not in result['type']

    result = normalize("BACnetObjectType ::= ENUMERATED { a (0) }",
                       well_known=wellknown.WellKnown({}, {}))
    assert result['type']['range'] == {'minimum': 0, 'maximum': 1}


def test_documented_proprietary_values():
    result = normalize(r"""
        BACnetShedState ::= ENUMERATED {
            shed-inactive (0),
            shed-request-pending (1),
            shed-compliant (2),
            shed-non-compliant (3),
            ...
            -- Enumerated values 0-63 are reserved for definition by ASHRAE.
            -- Enumerated values 64-255 may be used by others subject to the
            -- procedures and constraints described in Clause 23.
            }
    """)
    t = result['type']
    assert t['extensible'] is True
    assert t['range'] == {'minimum': 0, 'maximum': 4}
    assert t['standard'] == {'from': 0, 'to': 63}
    assert t['proprietary'] == {'from': 64, 'to': 255}


def test_documented_proprietary_values_keep_range():
    result = normalize(r"""
        -- Enumerated values 0-63 are reserved for definition by ASHRAE.
        -- Enumerated values 64-255 may be used by others.
        BACnetFoo ::= ENUMERATED { a (0), b (1), ... }
    """)
    t = result['type']
    assert t['range'] == {'minimum': 0, 'maximum': 2}
    assert t['standard'] == {'from': 0, 'to': 63}
    assert t['proprietary'] == {'from': 64, 'to': 255}


def test_undocumented_proprietary_values():
    result = normalize(r"""
        BACnetShedState ::= ENUMERATED {
            shed-inactive (0),
            shed-request-pending (1),
            ...
            -- values can be extended
            }
    """)
    t = result['type']
    assert t['extensible'] is True
    assert t['range'] == {'minimum': 0, 'maximum': 2}
    assert t['proprietary'] == {'from': 1, 'to': 0}
    assert 'standard' not in t


def test_not_extensible_enumerated_has_no_proprietary():
    result = normalize(r"""
        Values ::= ENUMERATED {
            a (3),
            b (5)
            -- Enumerated values 0-63 are reserved for definition by ASHRAE.
            -- Enumerated values 64-255 may be used by others.
            }
    """)
    t = result['type']
    assert t['range'] == {'minimum': 3, 'maximum': 6}
    assert 'proprietary' not in t
    assert 'standard' not in t


def test_sequence():
    result = normalize(
        "Item ::= SEQUENCE { a [0] Unsigned OPTIONAL, b [1] Integer }")
    assert result == {
        'alias': 'Item',
        'name': 'item',
        'type': {'base': 'sequence',
                 'fields': [{'alias': 'a',
                             'name': 'a',
                             'type': 'unsigned',
                             'context': 0,
                             'optional': True},
                            {'alias': 'b',
                             'name': 'b',
                             'type': 'integer',
                             'context': 1,
                             'optional': False}]}}


def test_sequence_keeps_field_order():
    result = normalize(
        "Item ::= SEQUENCE { z [2] Unsigned, y [1] Unsigned, x Unsigned }")
    fields = result['type']['fields']
    assert [i['name'] for i in fields] == ['z', 'y', 'x']
    assert [i.get('context') for i in fields] == [2, 1, None]


def test_choice():
    result = normalize(r"""
        BACnetTimeStamp ::= CHOICE {
            time [0] Time,
            -- sequence number
            sequence-number [1] Unsigned (0..65535),
            datetime [2] BACnetDateTime
            }
    """)
    assert result == {
        'alias': 'BACnetTimeStamp',
        'name': 'time-stamp',
        'type': {'base': 'choice',
                 'options': [{'alias': 'time',
                              'name': 'time',
                              'type': 'time',
                              'context': 0},
                             {'alias': 'sequence-number',
                              'name': 'sequence-number',
                              'type': {'base': 'unsigned',
                                       'minimum': 0,
                                       'maximum': 65535},
                              'context': 1,
                              'comment': 'sequence number'},
                             {'alias': 'datetime',
                              'name': 'datetime',
                              'type': 'date-time',
                              'context': 2}]}}


def test_nested_structures():
    result = normalize(r"""
        Nested ::= SEQUENCE {
            list [0] SEQUENCE OF CHOICE {
                value [0] Unsigned
                },
            flags BIT STRING { x (0), y (1) } OPTIONAL
            }
    """)
    assert result['type']['fields'] == [
        {'alias': 'list',
         'name': 'list',
         'type': {'base': 'choice',
                  'options': [{'alias': 'value',
                               'name': 'value',
                               'type': 'unsigned',
                               'context': 0}],
                  'series': True},
         'context': 0,
         'optional': False},
        {'alias': 'flags',
         'name': 'flags',
         'type': {'base': 'bit-string',
                  'bits': [{'alias': 'x', 'name': 'x', 'position': 0},
                           {'alias': 'y', 'name': 'y', 'position': 1}],
                  'extensible': False,
                  'length': 2},
         'optional': True}]


@pytest.mark.parametrize("number", [None, -1, 255, 1000, True, 1.0])
def test_invalid_context_is_omitted(number):
    definition = common.Definition(
        name='Item',
        type='CHOICE',
        items=[common.Item(name='a', number=number, type='Unsigned')])
    result = normalizer.normalize(definition)
    assert 'context' not in result['type']['options'][0]


@pytest.mark.parametrize("number", [0, 128, 254])
def test_valid_context(number):
    definition = common.Definition(
        name='Item',
        type='SEQUENCE',
        items=[common.Item(name='a', number=number, type='Unsigned')])
    result = normalizer.normalize(definition)
    assert result['type']['fields'][0]['context'] == number


def test_registry_wins():
    record = {'alias': 'Foo', 'name': 'foo', 'primitive': 99}
    reg = registry.Registry(record)

    result = normalize("Foo ::= Unsigned (0..1)", registry=reg)
    assert result is record


def test_registry_normalized_name():
    record = {'alias': 'Other', 'name': 'object-type', 'type': 'unsigned'}
    reg = registry.Registry(record)

    result = normalize("BACnetObjectType ::= ENUMERATED { a (0) }",
                       registry=reg)
    assert result is record


def test_predefined_registry():
    result = normalize("Unsigned8 ::= Unsigned (0..100)",
                       registry=registry.predefined_registry())
    assert result == {'alias': 'Unsigned8',
                      'name': 'unsigned-8',
                      'type': {'base': 'unsigned',
                               'minimum': 0,
                               'maximum': 255}}

    result = normalize("Percent ::= Unsigned (0..100)",
                       registry=registry.predefined_registry())
    assert result['alias'] == 'Percent'


def test_normalize_all():
    definitions = parser.parse(r"""
        A ::= Unsigned
        B ::= Unsigned8
        C ::= Integer (0..1)
    """)
    result = normalizer.normalize_all(definitions,
                                      registry.predefined_registry())
    assert not isinstance(result, list)
    assert [i['name'] for i in result] == ['a', 'b', 'c']


def test_every_kind_has_enricher():
    assert set(normalizer._enrichers) == {None, *common.Kind}
