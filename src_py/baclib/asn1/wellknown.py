"""Well-known BACnet types with fixed value spaces

Enumerated entries replace the range computed from enumeration values and
define standard and proprietary spans::

    {'range': {'minimum': 0, 'maximum': 1024},
     'standard': {'from': 0, 'to': 127},
     'proprietary': {'from': 128, 'to': 1023}}

Bit string entries define maximum length and proprietary span::

    {'maximum': 64,
     'proprietary': {'from': 32, 'to': 63}}

Entries are keyed by original (BACnet) definition name.

"""

import typing

from baclib import json


class WellKnown(typing.NamedTuple):
    enumerated: typing.Dict[str, json.Data]
    bit_string: typing.Dict[str, json.Data]

    def to_json(self) -> json.Data:
        return {'enumerated': self.enumerated,
                'bit_string': self.bit_string}

    @staticmethod
    def from_json(data: json.Data) -> 'WellKnown':
        return WellKnown(enumerated=dict(data.get('enumerated', {})),
                         bit_string=dict(data.get('bit_string', {})))


def merge(base: WellKnown,
          override: WellKnown
          ) -> WellKnown:
    """Create tables with `override` entries replacing `base` entries"""
    return WellKnown(enumerated={**base.enumerated, **override.enumerated},
                     bit_string={**base.bit_string, **override.bit_string})


def _enumerated(standard_to, proprietary_to):
    return {'range': {'minimum': 0, 'maximum': proprietary_to + 1},
            'standard': {'from': 0, 'to': standard_to},
            'proprietary': {'from': standard_to + 1, 'to': proprietary_to}}


default_well_known: WellKnown = WellKnown(
    enumerated={
        'BACnetAuditOperation': _enumerated(31, 63),
        'BACnetErrorClass': _enumerated(63, 65535),
        'BACnetErrorCode': _enumerated(255, 65535),
        'BACnetEventType': _enumerated(63, 65535),
        'BACnetLifeSafetyMode': _enumerated(255, 65535),
        'BACnetLifeSafetyOperation': _enumerated(63, 65535),
        'BACnetLifeSafetyState': _enumerated(255, 65535),
        'BACnetObjectType': _enumerated(127, 1023),
        'BACnetPropertyIdentifier': _enumerated(511, 4194303),
        'BACnetReliability': _enumerated(63, 65535),
        'BACnetRestartReason': _enumerated(63, 255)},
    bit_string={
        'BACnetAuditOperationFlags': {
            'maximum': 64,
            'proprietary': {'from': 32, 'to': 63}}})
"""Default well-known types"""
