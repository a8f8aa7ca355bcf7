"""Predefined type registry

Predefined types are already normalized definitions which take precedence
over definitions normalized from parsed ASN.1 sources. Registry is created
once and afterwards used only for lookups.

"""

import functools
import itertools
import logging
import pathlib
import typing

from baclib import json
from baclib import util
from baclib.asn1 import common
from baclib.asn1.naming import to_name


mlog: logging.Logger = logging.getLogger(__name__)
"""Module logger"""

predefined_abstract_path: pathlib.Path = (common.package_path /
                                          'predefined.yaml')
"""Bundled abstract predefined type definitions"""


class Registry:
    """Predefined type registry

    Records are normalized definitions with at least ``alias`` (original
    name) and ``name`` (normalized name) properties. Record can be looked
    up by either of them. Later records replace earlier records with the
    same keys.

    """

    def __init__(self, *records: json.Data):
        self._by_alias = {}
        self._by_name = {}
        for record in records:
            self._by_alias[record['alias']] = record
            self._by_name[record['name']] = record

    def get(self, key: str) -> typing.Optional[json.Data]:
        """Get record by original or normalized name"""
        return util.first((self._by_alias.get(key),
                           self._by_name.get(key)),
                          lambda i: i is not None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._by_name)

    def __iter__(self) -> typing.Iterator[json.Data]:
        return iter(self._by_name.values())

    def to_json(self) -> json.Data:
        return list(self)


def generate_predefined(abstract: json.Data) -> typing.List[json.Data]:
    """Generate normalized records from abstract predefined definitions

    Abstract definition has `name` and either `primitive` (application tag
    or negative number for special constructions) or `base` with optional
    constraints `minimum`, `maximum`, `length` and `size`.

    Example::

        records = generate_predefined({'definitions': [
            {'name': 'Null', 'primitive': 0},
            {'name': 'Unsigned8', 'base': 'Unsigned', 'maximum': 255},
            {'name': 'BACnetWeekNDay', 'base': 'OctetString', 'size': 3}]})

        assert records == [
            {'alias': 'Null', 'name': 'null', 'primitive': 0},
            {'alias': 'Unsigned8', 'name': 'unsigned-8',
             'type': {'base': 'unsigned', 'minimum': 0, 'maximum': 255}},
            {'alias': 'BACnetWeekNDay', 'name': 'week-n-day',
             'type': {'base': 'octet-string', 'length': 3}}]

    """
    return [_generate_record(i) for i in abstract['definitions']]


def _generate_record(predefined):
    record = {'alias': predefined['name'],
              'name': to_name(predefined['name'], False)}

    if 'primitive' in predefined:
        record['primitive'] = predefined['primitive']
        return record

    base = to_name(predefined['base'], False)
    if len(predefined) == 2:
        record['type'] = base
        return record

    t = {'base': base}
    if 'maximum' in predefined:
        t['minimum'] = predefined.get('minimum', 0)
        t['maximum'] = predefined['maximum']
    if 'length' in predefined:
        t['length'] = {'minimum': 0, 'maximum': predefined['length']}
    if 'size' in predefined:
        t['length'] = predefined['size']

    record['type'] = t
    return record


def load_records(path: pathlib.Path) -> typing.List[json.Data]:
    """Load normalized records

    If `path` points to file, it contains either abstract predefined
    definitions (object with ``definitions``) or single normalized record.
    Otherwise, `path` is a directory recursively searched for such files.

    Raises:
        FileNotFoundError: `path` does not exist
        ValueError: `path` is file with unsupported suffix
        jsonschema.ValidationError

    """
    suffixes = ('.json', '.yaml', '.yml')
    if path.is_dir():
        paths = sorted(itertools.chain.from_iterable(
            path.rglob(f'*{i}') for i in suffixes))
    elif not path.exists():
        raise FileNotFoundError(f'predefined path {path} not found')
    elif path.suffix in suffixes:
        paths = [path]
    else:
        raise ValueError(f'unsupported predefined file {path}')

    records = []
    for i in paths:
        data = json.decode_file(i)
        if isinstance(data, dict) and 'definitions' in data:
            common.json_schema_repo.validate(
                'baclib://asn1/predefined.yaml#', data)
            records.extend(generate_predefined(data))
        else:
            common.json_schema_repo.validate(
                'baclib://asn1/record.yaml#', data)
            records.append(data)

    mlog.debug('loaded %s predefined records from %s', len(records), path)
    return records


def load_registry(*paths: pathlib.Path,
                  base: typing.Optional[Registry] = None
                  ) -> Registry:
    """Create registry from files

    Records from `paths` replace records from `base` registry.

    """
    records = itertools.chain(base or [],
                              *(load_records(i) for i in paths))
    return Registry(*records)


@functools.lru_cache(maxsize=None)
def predefined_registry() -> Registry:
    """Registry generated from bundled predefined definitions

    Registry is generated on first call and shared afterwards.

    """
    return load_registry(predefined_abstract_path)
