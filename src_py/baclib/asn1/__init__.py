"""BACnet ASN.1 definitions

Parsing of BACnet ASN.1 type definitions and their normalization::

    from baclib import asn1

    definitions = asn1.parse('Percent ::= Unsigned (0..100)')
    registry = asn1.predefined_registry()
    normalized = [asn1.normalize(i, registry) for i in definitions]

    assert normalized == [{'alias': 'Percent',
                           'name': 'percent',
                           'type': {'base': 'unsigned',
                                    'minimum': 0,
                                    'maximum': 100}}]

"""

from baclib.asn1.common import (Kind,
                                Range,
                                Item,
                                Definition,
                                ParseError,
                                EncodingError,
                                MatchError,
                                RangeError,
                                ItemsError,
                                definition_to_json,
                                definition_from_json)
from baclib.asn1.naming import to_name
from baclib.asn1.normalizer import (normalize,
                                    normalize_all)
from baclib.asn1.parser import (parse,
                                parse_file)
from baclib.asn1.registry import (Registry,
                                  generate_predefined,
                                  load_registry,
                                  predefined_registry)
from baclib.asn1.wellknown import (WellKnown,
                                   default_well_known)


__all__ = ['Kind',
           'Range',
           'Item',
           'Definition',
           'ParseError',
           'EncodingError',
           'MatchError',
           'RangeError',
           'ItemsError',
           'definition_to_json',
           'definition_from_json',
           'to_name',
           'normalize',
           'normalize_all',
           'parse',
           'parse_file',
           'Registry',
           'generate_predefined',
           'load_registry',
           'predefined_registry',
           'WellKnown',
           'default_well_known']
