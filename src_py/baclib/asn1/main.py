"""BACnet ASN.1 conversion main"""

from pathlib import Path
import itertools
import logging.config
import sys
import typing

import appdirs
import click

from baclib import json
from baclib import util
from baclib.asn1 import common
from baclib.asn1 import normalizer
from baclib.asn1 import parser
from baclib.asn1 import registry
from baclib.asn1 import wellknown


mlog: logging.Logger = logging.getLogger(__name__)
"""Module logger"""

user_conf_dir: Path = Path(appdirs.user_config_dir('baclib'))
"""User configuration directory"""

asn1_suffixes: typing.Tuple[str, ...] = ('.asn1', '.asn')
"""ASN.1 source file suffixes"""


@click.command()
@click.option('--conf', default=None, metavar='PATH', type=Path,
              help="configuration defined by baclib://asn1/main.yaml# "
                   "(default $XDG_CONFIG_HOME/baclib/asn1.{yaml|yml|json})")
@click.option('--format', 'output_format', default=None,
              type=click.Choice(['yaml', 'json']),
              help="output format (default derived from --output suffix "
                   "or 'yaml')")
@click.option('--raw', is_flag=True,
              help="output parsed definitions without normalization")
@click.option('--predefined', 'predefined_paths', multiple=True,
              metavar='PATH', type=Path,
              help="additional predefined type file or directory")
@click.option('--log-level', default='WARNING',
              type=click.Choice(['CRITICAL', 'ERROR', 'WARNING', 'INFO',
                                 'DEBUG']),
              help="log level used if configuration has no 'log' "
                   "(default 'WARNING')")
@click.option('--output', 'output_path', default=None, metavar='PATH',
              type=Path,
              help="output file (default stdout)")
@click.argument('paths', nargs=-1, required=True, type=Path)
def main(conf: typing.Optional[Path],
         output_format: typing.Optional[str],
         raw: bool,
         predefined_paths: typing.Tuple[Path, ...],
         log_level: str,
         output_path: typing.Optional[Path],
         paths: typing.Tuple[Path, ...]):
    """Convert BACnet ASN.1 definitions to normalized JSON or YAML"""
    conf = load_conf(conf)
    logging.config.dictConfig(conf.get('log') or
                              _get_default_log_conf(log_level))
    json_format = _get_format(output_format or conf.get('format'),
                              output_path)

    definitions = []
    for path in get_asn1_paths(paths):
        try:
            definitions.extend(parser.parse_file(path))
        except common.ParseError as e:
            mlog.debug('parse error in %s', path, exc_info=e)
            click.echo(f'{path}:{e.line}: {e.message}', err=True)
            sys.exit(1)

    if raw:
        output = [common.definition_to_json(i) for i in definitions]

    else:
        predefined = registry.load_registry(
            *(Path(i) for i in conf.get('predefined', [])),
            *predefined_paths,
            base=registry.predefined_registry())
        well_known = wellknown.merge(
            wellknown.default_well_known,
            wellknown.WellKnown.from_json(conf.get('well_known', {})))
        output = list(normalizer.normalize_all(definitions, predefined,
                                               well_known))

    mlog.info('converted %s definitions', len(output))
    if output_path:
        json.encode_file(output, output_path, json_format)
    else:
        click.echo(json.encode(output, format=json_format, indent=4))


def load_conf(path: typing.Optional[Path]) -> json.Data:
    """Load and validate configuration

    If `path` is ``None``, configuration is searched in user configuration
    directory. Missing default configuration results in empty
    configuration.

    """
    if not path:
        candidates = ((user_conf_dir / 'asn1').with_suffix(i)
                      for i in ('.yaml', '.yml', '.json'))
        path = util.first(candidates, lambda i: i.exists())
    if not path:
        return {}

    conf = json.decode_file(path) or {}
    common.json_schema_repo.validate('baclib://asn1/main.yaml#', conf)
    return conf


def get_asn1_paths(paths: typing.Iterable[Path]) -> typing.List[Path]:
    """Expand directories to contained ASN.1 source files"""
    result = []
    for path in paths:
        if path.is_dir():
            result.extend(sorted(itertools.chain.from_iterable(
                path.rglob(f'*{i}') for i in asn1_suffixes)))
        else:
            result.append(path)
    return result


def _get_format(name, output_path):
    if name:
        return {'yaml': json.Format.YAML,
                'json': json.Format.JSON}[name]
    if output_path:
        return json.get_format(output_path)
    return json.Format.YAML


def _get_default_log_conf(level):
    return {'version': 1,
            'formatters': {'console': {
                'format': '[%(asctime)s %(levelname)s %(name)s] %(message)s'}},
            'handlers': {'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'console',
                'level': level}},
            'loggers': {'baclib': {'level': level}},
            'root': {'level': 'WARNING',
                     'handlers': ['console']},
            'disable_existing_loggers': False}


if __name__ == '__main__':
    sys.argv[0] = 'baclib-asn1'
    sys.exit(main())
