"""
Launch data structures

ARCHITECTURE:
- Immutable value objects (dataclasses) passed between bridge components
- Created fresh for every invocation, never cached or shared
- Discarded once the ExitOutcome has been reported to the caller

DATA FLOW:
InvocationRequest → CommandResolver/PathTranslator → ResolvedTarget →
TargetClassifier → LaunchKind → ArgumentEncoder → LaunchPlan
                              → EnvironmentBridge → BridgedEnvironment →
ProcessLauncher → ExitOutcome

USAGE PATTERN:
request = InvocationRequest(command='foo.exe', args=('build',),
                            cwd='/mnt/c/src', env=dict(os.environ))
plan, bridged_env = bridge.prepare(request)
# plan.kind = LaunchKind.DIRECT_NATIVE
# plan.program = 'C:\\tools\\foo.exe'

DESIGN PATTERN: Data Transfer Object (DTO)
"""
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


class PathOrigin(Enum):
    """Where a resolved native path came from"""
    MOUNTED_DRIVE = 'MountedDrive'   # /mnt/c/... → C:\...
    UNC_OR_OTHER = 'UncOrOther'      # Linux-only → \\wsl.localhost\<distro>\...


class LaunchKind(Enum):
    """Low-level launch strategy for a target"""
    DIRECT_NATIVE = 'DirectNative'              # exec the binary itself
    INTERPRETER_WRAPPED = 'InterpreterWrapped'  # cmd.exe /c <script>


@dataclass(frozen=True)
class InvocationRequest:
    """
    What the caller asked for.

    command: command token or path exactly as supplied
    args: logical arguments, already free of the calling shell's quoting
    cwd: caller's working directory (Linux form, made absolute against the
         process's own working directory when relative)
    env: caller's environment (keys unique)
    """

    command: str
    args: Tuple[str, ...] = ()
    cwd: str = '/'
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the containers so the request cannot change after receipt
        object.__setattr__(self, 'args', tuple(self.args))
        object.__setattr__(self, 'cwd', posixpath.abspath(self.cwd))
        object.__setattr__(self, 'env', MappingProxyType(dict(self.env)))


@dataclass(frozen=True)
class ResolvedTarget:
    """
    Native location of the requested command.

    native_path: Windows-form absolute path (C:\\... or \\\\host\\share\\...)
    linux_path: the same file as seen from the Linux side
    origin: MOUNTED_DRIVE or UNC_OR_OTHER
    """

    native_path: str
    linux_path: str
    origin: PathOrigin

    @property
    def is_mounted(self) -> bool:
        return self.origin is PathOrigin.MOUNTED_DRIVE


@dataclass(frozen=True)
class LaunchPlan:
    """
    Exactly what is handed to process creation.

    program: the program as Windows names it (target path, or interpreter)
    executable: what the Linux process-creation primitive is called with
    argv: encoded arguments following the program
    kind: DIRECT_NATIVE or INTERPRETER_WRAPPED
    pipe_stdio: forward stdio through pipes instead of inheriting descriptors

    Invariant: for INTERPRETER_WRAPPED, argv[0] is the interpreter's
    run flag and argv[1] is the (quoted) target path.
    """

    program: str
    executable: str
    argv: Tuple[str, ...]
    kind: LaunchKind
    target: ResolvedTarget
    pipe_stdio: bool = False

    def command_line(self) -> List[str]:
        """Full argv for subprocess.Popen"""
        return [self.executable, *self.argv]

    def __str__(self) -> str:
        return f"LaunchPlan[{self.kind.value}] {self.program} {' '.join(self.argv)}".rstrip()


@dataclass(frozen=True)
class BridgedEnvironment:
    """
    Environment and working directory handed to the child.

    env: variables, path-valued ones in native form
    cwd: native working directory (what the child sees)
    linux_cwd: the same directory for the Linux process-creation primitive
    translated: names of the variables whose value was translated
    warnings: non-fatal translation problems (values passed verbatim)
    """

    env: Mapping[str, str]
    cwd: str
    linux_cwd: str
    translated: Tuple[str, ...] = ()
    warnings: Tuple = ()


@dataclass(frozen=True)
class ExitOutcome:
    """
    Result of an invocation.

    launched=True: the child ran, exit_code is its status (verbatim,
    negative for signal-terminated children on POSIX).
    launched=False: the bridge could not start the child; exit_code is the
    bridge-level status of `error`.
    """

    exit_code: int
    launched: bool = True
    error: Optional[Exception] = None
    plan: Optional[LaunchPlan] = None

    @classmethod
    def launch_failed(cls, error, plan: Optional[LaunchPlan] = None) -> 'ExitOutcome':
        return cls(exit_code=error.exit_code, launched=False, error=error, plan=plan)

    @property
    def process_exit_code(self) -> int:
        """Exit status for the caller's own process (0-255)"""
        if self.exit_code < 0:
            return 128 - self.exit_code
        return self.exit_code & 0xFF
