#!/usr/bin/env python3
"""
CLI for jointcad expressions and designs.

Usage:
    python -m jointcad eval EXPR [--param NAME=VALUE ...]
    python -m jointcad check FILE.json
    python -m jointcad teeth FILE.json [--shape ID] [--json]

Examples:
    # Evaluate an expression
    python -m jointcad eval "max(width, 10) / 2" --param width=24

    # Resolve every shape of a saved design and report problems
    python -m jointcad check box.json

    # Print the teeth of every jointed edge of one shape
    python -m jointcad teeth box.json --shape rectangle-1
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from .bindings import BindingError
from .config import ConfigError, load_config
from .design import Design
from .expr import DiagnosticCollector, ExpressionEngine, ExpressionError
from .logging_config import setup_logging
from .parameters import ParameterError
from .shapes import ShapeError

LOAD_ERRORS = (OSError, ValueError, TypeError, KeyError, ShapeError, BindingError, ParameterError)


def parse_param(param_str: str) -> tuple:
    """Parse a parameter string like 'name=value' into (name, float value)."""
    if '=' not in param_str:
        raise ValueError(f"Invalid parameter format: {param_str} (expected name=value)")

    name, value_str = param_str.split('=', 1)
    name = name.strip()
    try:
        return (name, float(value_str.strip()))
    except ValueError:
        raise ValueError(f"Invalid value for parameter {name}: {value_str.strip()!r}") from None


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _print_warnings(diagnostics: DiagnosticCollector) -> None:
    for diag in diagnostics.warnings:
        print(diag.format(), file=sys.stderr)


def cmd_eval(args) -> int:
    """Evaluate a single expression."""
    context: Dict[str, float] = {}
    try:
        for param_str in args.param or []:
            name, value = parse_param(param_str)
            context[name] = value
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    engine = ExpressionEngine()
    diagnostics = DiagnosticCollector()
    try:
        ast = engine.parse(args.expression)
        value = engine.evaluate(ast, context, diagnostics)
    except ExpressionError as exc:
        exc.diagnostic.source = exc.diagnostic.source or args.expression
        print(exc.diagnostic.format(), file=sys.stderr)
        return 1

    for diag in diagnostics.warnings:
        diag.source = args.expression
    _print_warnings(diagnostics)
    print(format_number(value))
    return 0


def _load_design(path: str, config) -> Optional[Design]:
    try:
        return Design.load(path, config=config)
    except LOAD_ERRORS as exc:
        print(f"Error: cannot load {path}: {exc}", file=sys.stderr)
        return None


def cmd_check(args, config) -> int:
    """Load a design and resolve every shape."""
    design = _load_design(args.file, config)
    if design is None:
        return 1

    diagnostics = DiagnosticCollector()
    failures = 0
    for shape in design.shapes:
        try:
            design.get_resolved(shape.id, diagnostics)
        except (ExpressionError, BindingError) as exc:
            failures += 1
            print(f"{shape.id}: {exc}", file=sys.stderr)

    _print_warnings(diagnostics)
    print(f"{len(design.shapes)} shape(s), {len(design.parameters)} parameter(s), "
          f"{len(design.joinery)} joint(s)")
    if failures:
        print(f"{failures} shape(s) failed to resolve", file=sys.stderr)
        return 1
    print("OK")
    return 0


def cmd_teeth(args, config) -> int:
    """Print the tooth table of every jointed edge."""
    design = _load_design(args.file, config)
    if design is None:
        return 1
    if args.shape and design.get_shape(args.shape) is None:
        print(f"Error: no shape with id {args.shape}", file=sys.stderr)
        return 1

    diagnostics = DiagnosticCollector()
    try:
        layout = design.joinery_layout(diagnostics, shape_id=args.shape)
    except (ExpressionError, BindingError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _print_warnings(diagnostics)

    if args.json:
        print(json.dumps([
            {"key": item.key, "joint": item.record.to_json(),
             "teeth": [tooth.to_json() for tooth in item.teeth]}
            for item in layout
        ], indent=2))
        return 0

    for item in layout:
        record = item.record
        print(f"{item.key}  {record.type}  align={record.align}  "
              f"length={item.edge.length():.3f}  teeth={len(item.teeth)}")
        for tooth in item.teeth:
            print(f"  #{tooth.index:<3d} start={tooth.start_distance:9.3f}  "
                  f"width={tooth.width:8.3f}  depth={tooth.depth:7.3f}  taper={tooth.taper:6.3f}")
    if not layout:
        print("No jointed edges.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='python -m jointcad',
        description='Parametric shape expressions and edge joinery',
    )
    parser.add_argument('--config', metavar='PATH', help='YAML configuration file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # eval command
    eval_parser = subparsers.add_parser('eval', help='Evaluate an expression')
    eval_parser.add_argument('expression', help='Expression text')
    eval_parser.add_argument('-p', '--param', action='append', metavar='NAME=VALUE',
                             help='Parameter value (can be repeated)')

    # check command
    check_parser = subparsers.add_parser('check', help='Resolve every shape of a design')
    check_parser.add_argument('file', help='Design JSON file')

    # teeth command
    teeth_parser = subparsers.add_parser('teeth', help='Print synthesized teeth')
    teeth_parser.add_argument('file', help='Design JSON file')
    teeth_parser.add_argument('--shape', metavar='ID', help='Only this shape')
    teeth_parser.add_argument('--json', action='store_true', help='JSON output')

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    level = logging.DEBUG if args.verbose else config.logging.level
    setup_logging(level, config.logging.file, stream=sys.stderr)

    if args.action == 'eval':
        return cmd_eval(args)
    elif args.action == 'check':
        return cmd_check(args, config)
    elif args.action == 'teeth':
        return cmd_teeth(args, config)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
