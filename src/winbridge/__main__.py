"""
winrun - run a Windows program from WSL as if it were a local command

    winrun [options] <command> [args...]

Everything after <command> is passed to the program untouched. The exit
status is the program's own, or one of the bridge-level codes when the
program could not be started:
    127  command not found
    126  process creation failed
    125  unsupported target (not .exe/.com/.bat/.cmd)
    124  path has no native form

A program may exit with these same codes itself. A bridge failure is the
one that also prints a "winrun: error:" line on stderr; library callers
check ExitOutcome.launched instead.
"""
import argparse
import dataclasses
import logging
import os
import signal
import sys
from typing import List, Mapping

from . import constants
from .bridge import WindowsBridge
from .config import BridgeConfig, parse_suffixes
from .launch_plan import InvocationRequest

LOG_FORMAT = '%(name)s - %(levelname)s - %(message)s'

EXIT_STATUS_HELP = """\
exit status:
  the program's own exit status, or when the program could not be started:
    127  command not found
    126  process creation failed
    125  unsupported target (not .exe/.com/.bat/.cmd)
    124  path has no native form
    2    invalid usage or configuration
  a program may exit with 124-127 itself; only a bridge failure also
  prints a "winrun: error:" line on stderr
"""


def _parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='winrun',
        description='Run a Windows executable or batch script from WSL.',
        epilog=EXIT_STATUS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='More logging (-v info, -vv debug)')
    parser.add_argument('--unc-strategy', choices=constants.UNC_STRATEGIES, default=None,
                        help='How Linux-only paths are translated (default: builtin)')
    parser.add_argument('--batch-suffix', action='append', default=[], metavar='SUFFIX',
                        help='Extra suffix run through the command interpreter (repeatable)')
    parser.add_argument('--pipe-stdio', choices=constants.PIPE_STDIO_MODES, default=None,
                        help='Forward stdio through pipes (default: auto, batch scripts only)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Print the launch plan instead of running it')
    parser.add_argument('command', help='Command name or path')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Arguments for the command')
    return parser.parse_args(argv)


def _setup_logging(verbose: int, environ: Mapping[str, str]):
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level_name = environ.get('WINBRIDGE_LOG_LEVEL', 'WARNING').upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _build_config(args: argparse.Namespace, environ: Mapping[str, str]) -> BridgeConfig:
    """Environment first, CLI flags override"""
    config = BridgeConfig.from_env(environ)
    overrides = {}
    if args.unc_strategy:
        overrides['unc_strategy'] = args.unc_strategy
    if args.batch_suffix:
        overrides['extra_batch_suffixes'] = (
            config.extra_batch_suffixes + parse_suffixes(' '.join(args.batch_suffix))
        )
    if args.pipe_stdio:
        overrides['pipe_stdio'] = args.pipe_stdio
    if args.dry_run:
        overrides['dry_run'] = True
    return dataclasses.replace(config, **overrides) if overrides else config


def _raise_exit(signum, frame):
    # Unwinds through ProcessLauncher, which terminates the child first
    raise SystemExit(128 + signum)


def _install_signal_handlers():
    for name in ('SIGTERM', 'SIGHUP'):
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, _raise_exit)


def main(argv: List[str] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    _setup_logging(args.verbose, os.environ)

    try:
        config = _build_config(args, os.environ)
    except ValueError as e:
        print(f"winrun: error: {e}", file=sys.stderr)
        return constants.EXIT_USAGE

    _install_signal_handlers()

    request = InvocationRequest(
        command=args.command,
        args=tuple(args.args),
        cwd=os.getcwd(),
        env=dict(os.environ),
    )
    bridge = WindowsBridge(config)

    try:
        outcome = bridge.invoke(request)
    except KeyboardInterrupt:
        return 128 + signal.SIGINT

    if not outcome.launched:
        print(f"winrun: error: {outcome.error}", file=sys.stderr)
    elif config.dry_run and outcome.plan is not None:
        print(outcome.plan.program)
        for arg in outcome.plan.argv:
            print(f"  {arg}")
    return outcome.process_exit_code


if __name__ == '__main__':
    sys.exit(main())
