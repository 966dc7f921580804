"""
Contains the logic for the command-line interface.
"""
import argparse
import json
import logging
import pathlib
import sys

from rsldoc import embed
from rsldoc.builder import build_document
from rsldoc.config import RslConfig, load_config
from rsldoc.licenses import ARCHETYPES, COMMERCIAL_PAYMENT_TYPES, contents_from_links, create_license
from rsldoc.models import Content, contents_from_list, contents_to_list
from rsldoc.parser import parse_document
from rsldoc.utils import read_json, write_text
from rsldoc.validator import Severity, ValidationLevel, ValidationReport, validate

logger = logging.getLogger()
logger.setLevel(logging.DEBUG)
formatter = logging.Formatter('[{asctime}] [{levelname:8}] {name} :: {message}', style = '{')

streamHandler = logging.StreamHandler(sys.stderr)
streamHandler.setLevel(logging.INFO)
streamHandler.setFormatter(formatter)
logger.addHandler(streamHandler)

## Misc

def _load_contents(
        path: pathlib.Path,
        config: RslConfig,
        links: bool = False,
        archetype: str = None
    ) -> list[Content]:
    """
    Reads contents from a JSON file, or from an RSL document if *path* ends with ``.xml``.

    :param path: Path to the input file.
    :type path: pathlib.Path
    :param config: The config to take defaults from.
    :type config: RslConfig
    :param links: Whether the JSON file holds crawled links rather than contents, defaults to False
    :type links: bool, optional
    :param archetype: Archetype of the licenses attached to crawled links, defaults to the config value
    :type archetype: str, optional
    :return: The contents in the file.
    :rtype: list[Content]
    """
    if path.suffix.lower() == '.xml':
        return parse_document(path.read_text(encoding = 'utf-8'),
            config.fallback_url or '')

    data = read_json(str(path))
    if links:
        return contents_from_links(data, archetype or config.default_archetype,
            currency = config.default_currency)
    return contents_from_list(data)

def _log_report(report: ValidationReport) -> None:
    for result in report.results:
        level = logging.ERROR if result.type is Severity.ERROR else (
            logging.WARNING if result.type is Severity.WARNING else logging.INFO)
        context = f' ({result.context})' if result.context else ''
        logger.log(level, result.message + context)

def _level(args: argparse.Namespace, config: RslConfig) -> ValidationLevel:
    if args.comprehensive:
        return ValidationLevel.COMPREHENSIVE
    return ValidationLevel(config.validation_level)

## Commands

def build(args: argparse.Namespace, config: RslConfig):
    """
    Builds an RSL document from a JSON file of contents.
    Validation findings are logged, but never stop the build.
    """
    contents = _load_contents(args.inpath, config, args.links, args.archetype)
    report = validate(contents, _level(args, config))
    _log_report(report)
    if not report.is_valid:
        logger.warning('Building document despite validation errors.')
    write_text(build_document(contents), args.outpath)

def parse(args: argparse.Namespace, config: RslConfig):
    """
    Parses an RSL document and writes its contents as JSON.
    """
    fallback_url = args.fallback_url or config.fallback_url or ''
    contents = parse_document(args.inpath.read_text(encoding = 'utf-8'), fallback_url)
    write_text(json.dumps(contents_to_list(contents), indent = 2), args.outpath)

def validate_cmd(args: argparse.Namespace, config: RslConfig):
    """
    Validates a JSON file of contents, or an RSL document.
    Exits with status 1 if there are any errors.
    """
    report = validate(_load_contents(args.inpath, config), _level(args, config))
    _log_report(report)
    print(json.dumps(report.to_dict(), indent = 2))
    if not report.is_valid:
        sys.exit(1)

def license_cmd(args: argparse.Namespace, config: RslConfig):
    """
    Writes a new license as JSON.
    """
    options = {'currency': args.currency or config.default_currency}
    if args.name: options['name'] = args.name
    if args.usage: options['usage'] = args.usage
    if args.payment_type: options['payment_type'] = args.payment_type
    if args.amount: options['amount'] = args.amount
    if args.allow_education: options['non_commercial_only'] = False
    print(json.dumps(create_license(args.archetype, **options).to_dict(), indent = 2))

def embed_cmd(args: argparse.Namespace, config: RslConfig):
    """
    Writes RSL licensing embedded in another format.
    RSS and robots.txt inputs are checked first, and exit with status 1 on errors.
    """
    contents = _load_contents(args.inpath, config, args.links, args.archetype)
    license_url = args.license_url or config.license_url

    if args.format in ('rss', 'rss-template'):
        report = embed.validate_rss(contents)
    elif args.format == 'robots':
        report = embed.validate_robots(contents, license_url, args.website_url)
    else:
        report = ValidationReport()
    _log_report(report)
    if not report.is_valid:
        sys.exit(1)

    if args.format == 'rss':
        output = embed.rss_feed(contents, args.title, args.website_url or '',
            args.description, args.max_items)
    elif args.format == 'rss-template':
        output = embed.rss_template(contents, args.max_items)
    elif args.format == 'robots':
        output = embed.robots_txt(license_url, args.website_url, template = True)
    elif args.format == 'html':
        output = embed.html_head(contents, license_url)
    else:
        output = embed.media_metadata(contents, args.format)
    write_text(output, args.outpath)

## Parsing

def parse_args(argv = None):
    parser = argparse.ArgumentParser(prog = 'rsldoc', description = 'Builds, parses and validates RSL licensing documents.')
    subparsers = parser.add_subparsers(
        title = 'methods',
        help = f'Try running \'{parser.prog} <method> -h\' for more detail',
        metavar = '<method> [args...]',
        dest = 'method'
    )
    subparsers.required = True
    parser.add_argument('-d', '--debug', action = 'store_true', help = 'Log DEBUG level messages.')
    parser.add_argument('-c', '--config', type = pathlib.Path, help = 'path to a JSON config file. Default is ./rsldoc.json if present')

    build_parser = subparsers.add_parser('build', help = 'Builds an RSL document from a JSON file of contents.')
    build_parser.add_argument('inpath', type = pathlib.Path, help = 'path to a JSON file of contents, or of crawled links with --links.')
    build_parser.add_argument('-o', '--outpath', type = pathlib.Path, help = 'path to save the document to. Default is stdout')
    build_parser.add_argument('-l', '--links', action = 'store_true', help = 'read the input as crawled links, attaching a default license to each')
    build_parser.add_argument('-a', '--archetype', choices = sorted(ARCHETYPES), help = 'archetype of the licenses attached to crawled links. Default is taken from the config')
    build_parser.add_argument('--comprehensive', action = 'store_true', help = 'run comprehensive validation before building')
    build_parser.set_defaults(func = build)

    parse_parser = subparsers.add_parser('parse', help = 'Parses an RSL document into JSON.')
    parse_parser.add_argument('inpath', type = pathlib.Path, help = 'path to an RSL document.')
    parse_parser.add_argument('-f', '--fallback-url', help = 'URL for contents with no url attribute')
    parse_parser.add_argument('-o', '--outpath', type = pathlib.Path, help = 'path to save the JSON to. Default is stdout')
    parse_parser.set_defaults(func = parse)

    validate_parser = subparsers.add_parser('validate', help = 'Validates a JSON file of contents or an RSL document.')
    validate_parser.add_argument('inpath', type = pathlib.Path, help = 'path to a JSON file of contents, or an RSL document ending in .xml')
    validate_parser.add_argument('--comprehensive', action = 'store_true', help = 'run comprehensive validation')
    validate_parser.set_defaults(func = validate_cmd)

    license_parser = subparsers.add_parser('license', help = 'Creates a new license.')
    license_parser.add_argument('archetype', choices = sorted(ARCHETYPES), help = 'the kind of license to create')
    license_parser.add_argument('-n', '--name', help = 'label of the license')
    license_parser.add_argument('--currency', help = 'currency of the payment block')
    license_parser.add_argument('--usage', nargs = '+', help = 'permitted usages of a free license')
    license_parser.add_argument('--payment-type', choices = COMMERCIAL_PAYMENT_TYPES, help = 'payment type of a commercial license')
    license_parser.add_argument('--amount', help = 'price of a commercial license')
    license_parser.add_argument('--allow-education', action = 'store_true', help = 'permit educational users of a research license')
    license_parser.set_defaults(func = license_cmd)

    embed_parser = subparsers.add_parser('embed', help = 'Embeds RSL licensing in another format.')
    embed_parser.add_argument('format', choices = ['rss', 'rss-template', 'robots', 'html', 'epub', 'image'], help = 'the format to write')
    embed_parser.add_argument('inpath', type = pathlib.Path, help = 'path to a JSON file of contents, or an RSL document ending in .xml')
    embed_parser.add_argument('-l', '--links', action = 'store_true', help = 'read the input as crawled links')
    embed_parser.add_argument('-a', '--archetype', choices = sorted(ARCHETYPES), help = 'archetype of the licenses attached to crawled links')
    embed_parser.add_argument('-w', '--website-url', help = 'root URL of the website')
    embed_parser.add_argument('-u', '--license-url', help = 'public URL of the RSL document')
    embed_parser.add_argument('--title', default = 'Latest Articles', help = 'title of the RSS channel')
    embed_parser.add_argument('--description', default = 'Latest articles and content', help = 'description of the RSS channel')
    embed_parser.add_argument('--max-items', type = int, help = 'maximum number of RSS items')
    embed_parser.add_argument('-o', '--outpath', type = pathlib.Path, help = 'path to save the output to. Default is stdout')
    embed_parser.set_defaults(func = embed_cmd)

    args = parser.parse_args(argv)
    if args.debug:
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)

    config = load_config(str(args.config) if args.config else None)
    args.func(args, config)

if __name__ == '__main__':
    parse_args()
