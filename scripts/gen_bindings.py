#!/usr/bin/env python3
"""
gen_bindings.py - sol2 binding generator entry point

Generates the registration source for one module from the extractor's
records file.

Usage:
    python scripts/gen_bindings.py records.json [-o DIR] [--module NAME] [--config FILE]
"""

import argparse
import logging
import os
import sys

# Add scripts directory to path
script_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, script_dir)

from sol_bindgen import Generator, GenerationOptions, RecordSet

logger = logging.getLogger('gen_bindings')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate sol2 Lua bindings for one module')
    parser.add_argument('records', help='Records JSON written by the declaration extractor')
    parser.add_argument('--module', default=None,
                        help='Module name (default: "module" field of the records file)')
    parser.add_argument('-o', '--output', default=None,
                        help='Output directory (default: generated_bindings)')
    parser.add_argument('--config', default=None,
                        help='JSON file with generation options')
    parser.add_argument('--indent', type=int, default=None,
                        help='Indentation width of the generated code')
    parser.add_argument('--no-includes', action='store_true',
                        help='Do not emit #include lines')
    parser.add_argument('--no-registration-function', action='store_true',
                        help='Emit the bindings without the register_<module>_bindings wrapper')
    parser.add_argument('--emit-inheritance', action='store_true',
                        help='Declare exported base classes with sol::bases<...>')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def load_options(args: argparse.Namespace) -> GenerationOptions:
    """Options file first, then command-line overrides"""
    options = GenerationOptions.load(args.config) if args.config else GenerationOptions()
    if args.output:
        options.output_directory = args.output
    if args.indent is not None:
        options.indent_size = args.indent
    if args.no_includes:
        options.generate_includes = False
    if args.no_registration_function:
        options.generate_registration_function = False
    if args.emit_inheritance:
        options.emit_inheritance = True
    return options


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(name)s: %(message)s')

    try:
        options = load_options(args)
        record_set = RecordSet.load(args.records)
    except (OSError, ValueError) as e:
        logger.error(f'cannot load input: {e}')
        return 1

    module = args.module or record_set.module
    if not module:
        logger.error(f'{args.records}: no module name given')
        return 1

    print(f'  {args.records} => {module}')
    result = Generator(options).generate_file(module, record_set.records)
    result.errors[:0] = record_set.errors

    for warning in result.warnings:
        print(f'       warning: {warning}')
    for error in result.errors:
        print(f'       error: {error}')

    if not result.success:
        return 1
    print(f'  {result.output_path}: {result.total_bindings} bindings')
    return 0


if __name__ == '__main__':
    sys.exit(main())
