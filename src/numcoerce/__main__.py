#!/usr/bin/env python3
"""
CLI for the numcoerce power harness.

Usage:
    python -m numcoerce run [--fixtures FILE] [--base NUMBER] [--on-fatal halt|continue]
                               [--summary [text|json]]
    python -m numcoerce list [--fixtures FILE]
    python -m numcoerce eval BASE EXP

Examples:
    # Run the bundled pow() variation sequence
    python -m numcoerce run

    # Keep going after a fatal operand
    python -m numcoerce run --on-fatal continue

    # Evaluate a single power; operands use literal syntax
    python -m numcoerce eval 20.3 '"12.5abc"'
    python -m numcoerce eval 2 '[]'
    python -m numcoerce eval 2 object:classA
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml


def parse_operand(text: str, provider=None):
    """Parse an operand literal like 'null', '2.5', '"abc"' or '[1, 2]' into a Value."""
    from .values import from_python, object_val, string_val, resource_val

    text = text.strip()

    if text.lower() == 'null':
        return from_python(None)
    elif text.lower() == 'true':
        return from_python(True)
    elif text.lower() == 'false':
        return from_python(False)

    if text == 'object' or text.startswith('object:'):
        _, _, class_name = text.partition(':')
        return object_val(class_name or 'stdClass')

    if text.startswith('resource:'):
        if provider is None:
            raise ValueError("resource operands need a resource provider")
        return resource_val(provider.acquire(Path(text[len('resource:'):])))

    try:
        return from_python(int(text))
    except ValueError:
        pass

    try:
        return from_python(float(text))
    except ValueError:
        pass

    if text.startswith('['):
        try:
            items: Any = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid list literal: {text} ({e})")
        return from_python(items)

    # Strip quotes if present
    if (text.startswith('"') and text.endswith('"') and len(text) >= 2) or \
       (text.startswith("'") and text.endswith("'") and len(text) >= 2):
        text = text[1:-1]

    return string_val(text)


def cmd_run(args):
    """Run a fixture catalog."""
    from .runner import RunConfig, FatalPolicy, run

    try:
        config = RunConfig.from_env(
            fixtures_path=Path(args.fixtures) if args.fixtures else None,
            base=args.base,
            fatal_policy=FatalPolicy.parse(args.on_fatal) if args.on_fatal else None,
            resource_path=Path(args.resource_path) if args.resource_path else None,
        )
        result = run(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.summary == "json":
        print(json.dumps(result.diagnostics.to_json(), indent=2), file=sys.stderr)
    elif args.summary:
        print(result.diagnostics.summary(), file=sys.stderr)
    return result.exit_code


def cmd_list(args):
    """List the operands of a fixture catalog."""
    from .fixtures import load_catalog, catalog_summary, DEFAULT_CATALOG

    try:
        catalog = load_catalog(DEFAULT_CATALOG, Path(args.fixtures) if args.fixtures else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Catalog: {catalog.name}")
    print(f"Base: {catalog.base.kind.value} {catalog.base.describe()}")
    print(f"Inputs ({len(catalog.inputs)}):")
    for index, entry in enumerate(catalog.inputs, start=1):
        print(f"  {index:>2}. {entry.kind.value:<8} {entry.describe()}")

    counts = ", ".join(f"{k}={n}" for k, n in catalog_summary(catalog).items())
    print(f"Kinds: {counts}")
    return 0


def cmd_eval(args):
    """Evaluate a single power."""
    from .power import power
    from .printer import dump_outcome
    from .resources import ResourceProvider
    from .runner import EXIT_FATAL

    provider = ResourceProvider()
    try:
        base = parse_operand(args.base, provider)
        exp = parse_operand(args.exp, provider)
        outcome = power(base, exp)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        provider.close_all()

    print(dump_outcome(outcome))
    return EXIT_FATAL if outcome.is_fatal else 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m numcoerce',
        description='Dynamic value coercion for exponentiation',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log coercion details to stderr')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Run a fixture catalog against its base')
    run_parser.add_argument('--fixtures', metavar='FILE',
                            help='Fixture catalog (YAML); defaults to the bundled one')
    run_parser.add_argument('--base', type=float, metavar='NUMBER',
                            help='Override the catalog base')
    run_parser.add_argument('--on-fatal', choices=['halt', 'continue'],
                            help='Stop at a fatal operand or keep going (default: halt)')
    run_parser.add_argument('--resource-path', metavar='FILE',
                            help='File backing resource operands')
    run_parser.add_argument('--summary', nargs='?', const='text', choices=['text', 'json'],
                            help='Print diagnostics to stderr as a count (text) or a JSON report')

    # list command
    list_parser = subparsers.add_parser('list', help='List operands in a fixture catalog')
    list_parser.add_argument('--fixtures', metavar='FILE', help='Fixture catalog (YAML)')

    # eval command
    eval_parser = subparsers.add_parser('eval', help='Evaluate BASE ** EXP')
    eval_parser.add_argument('base', help='Base operand literal')
    eval_parser.add_argument('exp', help='Exponent operand literal')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'list':
        return cmd_list(args)
    elif args.action == 'eval':
        return cmd_eval(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
