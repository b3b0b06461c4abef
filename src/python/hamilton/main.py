#!/usr/bin/env python3
"""
===============================================================================
HAMILTON - COMMAND-LINE ENTRY POINT
===============================================================================
Evaluates a single quaternion operation on operands given in text form and
prints the result in canonical form.

USAGE:
    hamilton                                 # Show the configured demo value
    hamilton show 1+2i+3j+4k                 # Parse and print canonically
    hamilton times 0+1i 0+1j                 # Hamilton product i*j
    hamilton scale 1+2i+3j+4k 0.5            # Multiply by a real
    hamilton -- divide-right -1-2i+3j-4k 1+1i

Operands that start with '-' must come after a '--' separator so they are not
read as options.

EXIT STATUS:
    0  success
    1  operand could not be parsed, or division by a zero quaternion
    2  bad command line

DEPENDENCIES:
    numpy, pyyaml
===============================================================================
"""

import sys
import argparse
import logging
from pathlib import Path

import yaml

from hamilton.quaternion import Quaternion, QuaternionError, FormatError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / 'config' / 'hamilton_config.yaml'

DEFAULT_CONFIG = {
    'logging': {
        'level': 'WARNING',
        'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    },
    'demo': {
        'expression': '-1-2i+3j-4k',
    },
}


# ---------------------------------------------------------------------------
# Operations: name -> (operand count, function, help text)
# ---------------------------------------------------------------------------
def _scalar(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise FormatError(text, expected='a real number') from exc


OPERATIONS = {
    'show':         (1, lambda p: p, 'parse and print in canonical form'),
    'conjugate':    (1, lambda p: p.conjugate(), 'a-bi-cj-dk'),
    'opposite':     (1, lambda p: p.opposite(), '-a-bi-cj-dk'),
    'inverse':      (1, lambda p: p.inverse(), 'multiplicative inverse'),
    'norm':         (1, lambda p: p.norm(), 'sqrt(a^2+b^2+c^2+d^2)'),
    'is-zero':      (1, lambda p: p.is_zero(), 'all components within tolerance of 0'),
    'plus':         (2, lambda p, q: p.plus(q), 'p+q'),
    'minus':        (2, lambda p, q: p.minus(q), 'p-q'),
    'times':        (2, lambda p, q: p.times(q), 'Hamilton product p*q'),
    'scale':        (2, lambda p, r: p.times(r), 'p*r for a real r'),
    'divide-right': (2, lambda p, q: p.divide_by_right(q), 'p*inverse(q)'),
    'divide-left':  (2, lambda p, q: p.divide_by_left(q), 'inverse(q)*p'),
    'dot':          (2, lambda p, q: p.dot_mult(q), '(p*conj(q)+q*conj(p))/2'),
    'equals':       (2, lambda p, q: p.equals(q), 'equality within tolerance'),
}


def load_config(config_path: str = None) -> dict:
    """
    Load CLI configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to the packaged
            config/hamilton_config.yaml

    Returns:
        Configuration dictionary; sections or keys missing from the file
        take their built-in defaults
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    logger.debug(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    config = {}
    for section, defaults in DEFAULT_CONFIG.items():
        config[section] = dict(defaults)
        config[section].update(loaded.get(section) or {})
    return config


def configure_logging(config: dict, level: str = None) -> None:
    """Configure root logging from the 'logging' config section."""
    settings = config['logging']
    level_name = (level or settings['level']).upper()
    logging.basicConfig(level=level_name, format=settings['format'])
    logging.getLogger('hamilton').setLevel(level_name)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``hamilton`` command."""
    listing = '\n'.join(
        f"  {name:<13} {arity} operand{'s' if arity > 1 else ' '}  {text}"
        for name, (arity, _, text) in OPERATIONS.items()
    )
    parser = argparse.ArgumentParser(
        prog='hamilton',
        description='Quaternion arithmetic on values written as a+bi+cj+dk',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Operations:\n{listing}\n\n"
               "Put '--' before operands that start with '-'."
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config YAML')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Override the configured log level')
    parser.add_argument('operation', nargs='?', default=None,
                        choices=list(OPERATIONS),
                        help='Operation to evaluate (default: show the demo value)')
    parser.add_argument('operands', nargs='*',
                        help='Quaternion operands (second operand of scale is a real)')
    return parser


def run(argv=None) -> str:
    """
    Evaluate one operation and return the printable result.

    Args:
        argv: Argument list without the program name (defaults to sys.argv)

    Returns:
        Result in text form: a canonical quaternion, a float or a boolean

    Raises:
        FormatError: If an operand cannot be parsed
        DivisionByZero: If a divisor is zero
        SystemExit: On command-line errors (status 2)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logging(config, args.log_level)

    operation = args.operation
    operands = args.operands
    if operation is None:
        if operands:
            parser.error('operands given without an operation')
        operation = 'show'
        operands = [config['demo']['expression']]

    arity, func, _ = OPERATIONS[operation]
    if len(operands) != arity:
        parser.error(f"'{operation}' takes {arity} operand(s), got {len(operands)}")

    values = [Quaternion.parse(operands[0])]
    if arity == 2:
        if operation == 'scale':
            values.append(_scalar(operands[1]))
        else:
            values.append(Quaternion.parse(operands[1]))

    logger.info(f"Evaluating {operation} on {[str(v) for v in values]}")
    result = func(*values)
    return str(result)


def main(argv=None) -> int:
    """
    Main entry point. Prints the result of the requested operation.

    Returns:
        Process exit status
    """
    try:
        print(run(argv))
    except QuaternionError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read configuration: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
