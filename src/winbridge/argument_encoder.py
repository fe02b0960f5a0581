"""
Argument Encoder - re-serialize argv for the Windows command-line parser

ARCHITECTURE:
The calling shell already split the command line: every element of args
is ONE logical argument, free of the shell's own quoting. Windows processes
receive a single command-line string and split it again
(CommandLineToArgvW / Microsoft C runtime rules), so any argument holding
characters significant to that split must be quoted on the way in.

QUOTING RULE (Microsoft C runtime):
- no space/tab/newline/quote and not empty  → unchanged
- otherwise wrap in "..." where
    "           → \\"
    n×\\ + "    → 2n×\\ + \\"
    n×\\ at end → 2n×\\ (before the closing quote)
    n×\\ else   → unchanged

EXAMPLES:
build              → build
--name=a b         → "--name=a b"
say "hi"           → "say \\"hi\\""
C:\\dir with space\\ → "C:\\dir with space\\\\"
(empty)            → ""

COMMAND INTERPRETER (second parse):
cmd.exe reads the command line before the script does and acts on
^ & | < > ( ) % ! outside double quotes. An argument holding any of these,
or a double quote, is quoted as above and then every such character,
quotes included, is prefixed with ^. cmd.exe strips the carets and never
enters its own quoted mode, so the script receives the quoted form intact:
    a&b          → a^&b
    50%          → 50^%
    say "a&b"    → ^"say \\^"a^&b\\^"^"
Arguments without them are quoted as for a native target.

LAUNCH PLANS:
DIRECT_NATIVE:        program = C:\\tools\\foo.exe
                      argv    = [quote(a) for a in args]
INTERPRETER_WRAPPED:  program = cmd.exe
                      argv    = ['/c', quote_for_interpreter(C:\\tools\\setup.bat),
                                 quote_for_interpreter(a)...]

INVARIANT:
Splitting each produced element with the target's own parser yields exactly
the original logical argument.
"""
import logging
import re
from typing import Sequence, Tuple

from . import constants
from .config import BridgeConfig
from .launch_plan import LaunchKind, LaunchPlan, ResolvedTarget

_SIGNIFICANT_CHARS = frozenset(' \t\n\v"')
_INTERPRETER_CHARS = frozenset('^&|<>()%!"')
_INTERPRETER_CHAR_PATTERN = re.compile(r'([\^&|<>()%!"])')


def needs_quoting(arg: str) -> bool:
    return not arg or any(char in _SIGNIFICANT_CHARS for char in arg)


def quote_argument(arg: str) -> str:
    """Quote one argument so the Windows command-line parser reads it back intact"""
    if not needs_quoting(arg):
        return arg

    parts = ['"']
    backslashes = 0
    for char in arg:
        if char == '\\':
            backslashes += 1
            continue
        if char == '"':
            # Escape the pending backslashes and the quote itself
            parts.append('\\' * (backslashes * 2 + 1))
        else:
            parts.append('\\' * backslashes)
        parts.append(char)
        backslashes = 0

    # Trailing backslashes would escape the closing quote
    parts.append('\\' * (backslashes * 2))
    parts.append('"')
    return ''.join(parts)


def quote_for_interpreter(arg: str) -> str:
    """Quote one argument for a script run through cmd.exe /c"""
    quoted = quote_argument(arg)
    if not any(char in _INTERPRETER_CHARS for char in arg):
        return quoted
    return _INTERPRETER_CHAR_PATTERN.sub(r'^\1', quoted)


class ArgumentEncoder:
    """Build the LaunchPlan for a classified target"""

    def __init__(self, config: BridgeConfig = None, logger: logging.Logger = None):
        self.config = config or BridgeConfig()
        self.logger = logger or logging.getLogger('ArgumentEncoder')

    def encode(self, kind: LaunchKind, target: ResolvedTarget,
               args: Sequence[str]) -> Tuple[str, ...]:
        """Encoded argv following the program"""
        if kind is LaunchKind.INTERPRETER_WRAPPED:
            # The interpreter parses its command line a second time
            encoded = [quote_for_interpreter(arg) for arg in args]
            return (self.config.run_flag, quote_for_interpreter(target.native_path), *encoded)
        return tuple(quote_argument(arg) for arg in args)

    def build_plan(self, target: ResolvedTarget, kind: LaunchKind,
                   args: Sequence[str]) -> LaunchPlan:
        argv = self.encode(kind, target, args)

        if kind is LaunchKind.INTERPRETER_WRAPPED:
            program = self.config.interpreter
            executable = self.config.interpreter
        else:
            program = target.native_path
            executable = target.linux_path

        plan = LaunchPlan(
            program=program,
            executable=executable,
            argv=argv,
            kind=kind,
            target=target,
            pipe_stdio=self._pipe_stdio(kind),
        )
        self.logger.debug(f"Built {plan}")
        return plan

    def _pipe_stdio(self, kind: LaunchKind) -> bool:
        mode = self.config.pipe_stdio
        if mode == constants.PIPE_STDIO_ALWAYS:
            return True
        if mode == constants.PIPE_STDIO_NEVER:
            return False
        return kind is LaunchKind.INTERPRETER_WRAPPED
