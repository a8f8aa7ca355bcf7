"""BACnet to BAClib name conversion"""

import re
import typing


Prefix = typing.Union[None, bool, int, str]
"""Replacement of leading ``BACnet``"""


def to_name(string: str,
            prefix: Prefix = None
            ) -> str:
    """Convert BACnet type or item name to BAClib kebab-case name

    Leading ``BACnet`` (optionally followed by ``-``) is handled according
    to `prefix`:

        * ``None`` - kept (and converted to ``bacnet``)
        * ``False`` - removed
        * ``True`` - replaced with ``0-``
        * ``int`` - replaced with the number followed by ``-``
        * ``str`` - replaced with `prefix`

    Other occurrences of ``BACnet`` are converted as ``Bacnet``. Letters and
    digits are separated with ``-`` only if `string` starts with uppercase
    letter.

    Example::

        assert to_name('BACnetPropertyReference') == 'bacnet-property-reference'
        assert to_name('BACnetPropertyReference', False) == 'property-reference'
        assert to_name('BACnetPropertyReference', 42) == '42-property-reference'
        assert to_name('Unsigned16') == 'unsigned-16'
        assert to_name('dec-vt220') == 'dec-vt220'
        assert to_name('HTTPResponse') == 'http-response'

    """
    if prefix is False:
        prefix = ''
    elif prefix is True:
        prefix = '0-'
    elif isinstance(prefix, int):
        prefix = f'{prefix}-'

    if prefix is not None:
        string = re.sub(r'^BACnet-?', lambda _: prefix, string)

    result = string.replace('BACnet', 'Bacnet')
    result = re.sub(r'([a-z0-9])([A-Z])', r'\1-\2', result)
    result = re.sub(r'([A-Z])([A-Z][a-z])', r'\1-\2', result)

    if re.match(r'[A-Z]', string):
        result = re.sub(r'([a-zA-Z])(\d)', r'\1-\2', result)

    return result.lower()
