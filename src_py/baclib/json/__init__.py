"""JSON data serialization and validation

Normalized definitions, predefined type records and configurations are all
plain JSON data. This module provides their encoding (JSON or YAML) and
validation against JSON schemas.

"""

import enum
import io
import itertools
import json
import math
import pathlib
import typing

import jsonschema.validators
import yaml


Array: typing.Type = typing.List['Data']
Object: typing.Type = typing.Dict[str, 'Data']
Data: typing.Type = typing.Union[None, bool, int, float, str, Array, Object]
"""JSON data type identifier."""

Format = enum.Enum('Format', ['JSON', 'YAML'])
"""Encoding format"""


def get_format(path: pathlib.PurePath) -> Format:
    """Derive encoding format from path suffix"""
    if path.suffix == '.json':
        return Format.JSON
    if path.suffix in ('.yaml', '.yml'):
        return Format.YAML
    raise ValueError('can not determine format from path suffix')


def encode(data: Data,
           format: Format = Format.JSON,
           indent: typing.Optional[int] = None
           ) -> str:
    """Encode JSON data.

    Non finite numbers are not valid JSON and are rejected.

    Args:
        data: JSON data
        format: encoding format
        indent: indentation size

    """
    if format == Format.JSON:
        return json.dumps(data, indent=indent, allow_nan=False)

    if format == Format.YAML:
        _check_finite(data)
        dumper = (yaml.CSafeDumper if hasattr(yaml, 'CSafeDumper')
                  else yaml.SafeDumper)
        return str(yaml.dump(data, indent=indent, Dumper=dumper,
                             sort_keys=False))

    raise ValueError('unsupported format')


def decode(data_str: str,
           format: Format = Format.JSON
           ) -> Data:
    """Decode JSON data.

    Args:
        data_str: encoded JSON data
        format: encoding format

    """
    if format == Format.JSON:
        return json.loads(data_str)

    if format == Format.YAML:
        loader = (yaml.CSafeLoader if hasattr(yaml, 'CSafeLoader')
                  else yaml.SafeLoader)
        return yaml.load(io.StringIO(data_str), Loader=loader)

    raise ValueError('unsupported format')


def encode_file(data: Data,
                path: pathlib.PurePath,
                format: typing.Optional[Format] = None,
                indent: typing.Optional[int] = 4):
    """Encode JSON data to file.

    If `format` is ``None``, encoding format is derived from path suffix.

    """
    if format is None:
        format = get_format(path)

    with open(path, 'w', encoding='utf-8') as f:
        f.write(encode(data, format=format, indent=indent))


def decode_file(path: pathlib.PurePath,
                format: typing.Optional[Format] = None
                ) -> Data:
    """Decode JSON data from file.

    If `format` is ``None``, encoding format is derived from path suffix.

    """
    if format is None:
        format = get_format(path)

    with open(path, 'r', encoding='utf-8') as f:
        return decode(f.read(), format=format)


class SchemaRepository:
    """JSON Schema repository.

    Repository can be initialized with multiple arguments, which can be
    instances of ``pathlib.PurePath``, ``Data`` or ``SchemaRepository``.

    If an argument is of type ``pathlib.PurePath``, and path points to file
    with a suffix '.json', '.yml' or '.yaml', schema is decoded from the file.
    Otherwise, it is assumed that path points to a directory, which is
    recursively searched for json and yaml files.

    Each schema is identified by its ``$id`` property (without fragment).
    Adding two schemas with the same identifier raises ``ValueError``.

    """

    def __init__(self, *args: typing.Union[pathlib.PurePath,
                                           Data,
                                           'SchemaRepository']):
        self._schemas = {}
        for arg in args:
            if isinstance(arg, pathlib.PurePath):
                self._load_path(arg)
            elif isinstance(arg, SchemaRepository):
                self._schemas.update(arg._schemas)
            else:
                self._load_schema(arg)

    @property
    def schema_ids(self) -> typing.List[str]:
        """Identifiers of all schemas in repository"""
        return list(self._schemas.keys())

    def validate(self,
                 schema_id: str,
                 data: Data):
        """Validate data against JSON schema.

        Schema identifier can contain fragment (e.g. ``'baclib://a.yaml#'``).

        Raises:
            jsonschema.ValidationError

        """
        schema = self._schemas[_strip_fragment(schema_id)]
        cls = jsonschema.validators.validator_for(schema)
        cls(schema).validate(data)

    def _load_path(self, path):
        json_suffixes = {'.json', '.yaml', '.yml'}
        paths = ([path] if path.suffix in json_suffixes
                 else sorted(itertools.chain.from_iterable(
                    path.rglob(f'*{i}') for i in json_suffixes)))
        for i in paths:
            self._load_schema(decode_file(i))

    def _load_schema(self, schema):
        schema_id = _strip_fragment(schema['$id'])
        if schema_id in self._schemas:
            raise ValueError(f"duplicate schema id {schema_id}")
        self._schemas[schema_id] = schema


def _strip_fragment(schema_id):
    return schema_id.split('#', 1)[0]


def _check_finite(data):
    if isinstance(data, float) and not math.isfinite(data):
        raise ValueError(f'out of range float value {data}')
    if isinstance(data, dict):
        for i in data.values():
            _check_finite(i)
    elif isinstance(data, list):
        for i in data:
            _check_finite(i)
