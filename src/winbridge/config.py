"""
Bridge configuration

Knobs the core accepts (delivery is up to the caller: environment variables
through from_env(), CLI flags through dataclasses.replace()):
- which UNC fallback strategy translates Linux-only paths
- which suffixes count as batch-like beyond .bat/.cmd
- where Windows drives are mounted
- whether stdio is piped or inherited
"""
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from . import constants


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off', ''):
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


def parse_suffixes(value: str) -> Tuple[str, ...]:
    """
    Parse a suffix list: "ps1, .btm;.x" → ('.ps1', '.btm', '.x')
    """
    suffixes = []
    for item in re.split(r'[,;\s]+', value):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith('.'):
            item = '.' + item
        if item not in suffixes:
            suffixes.append(item)
    return tuple(suffixes)


@dataclass(frozen=True)
class BridgeConfig:
    """Configuration for one bridge instance (immutable)"""

    mount_root: str = constants.DEFAULT_MOUNT_ROOT
    unc_strategy: str = constants.UNC_STRATEGY_BUILTIN
    unc_host: str = constants.DEFAULT_UNC_HOST
    distro_name: Optional[str] = None
    wslpath_command: str = constants.DEFAULT_WSLPATH_COMMAND
    interpreter: str = constants.DEFAULT_INTERPRETER
    run_flag: str = constants.INTERPRETER_RUN_FLAG
    native_suffixes: Tuple[str, ...] = constants.NATIVE_SUFFIXES
    batch_suffixes: Tuple[str, ...] = constants.BATCH_SUFFIXES
    extra_batch_suffixes: Tuple[str, ...] = field(default_factory=tuple)
    pipe_stdio: str = constants.PIPE_STDIO_AUTO
    export_wslenv: bool = True
    terminate_grace_period: float = constants.TERMINATE_GRACE_PERIOD
    dry_run: bool = False

    def __post_init__(self):
        if self.unc_strategy not in constants.UNC_STRATEGIES:
            raise ValueError(
                f"Unknown UNC strategy {self.unc_strategy!r} "
                f"(expected one of {', '.join(constants.UNC_STRATEGIES)})"
            )
        if self.pipe_stdio not in constants.PIPE_STDIO_MODES:
            raise ValueError(
                f"Unknown stdio mode {self.pipe_stdio!r} "
                f"(expected one of {', '.join(constants.PIPE_STDIO_MODES)})"
            )
        if not self.mount_root.startswith('/'):
            raise ValueError(f"Mount root must be absolute: {self.mount_root!r}")
        # '/mnt/' and '/mnt' name the same root
        object.__setattr__(self, 'mount_root', self.mount_root.rstrip('/') or '/')
        object.__setattr__(self, 'extra_batch_suffixes',
                           parse_suffixes(' '.join(self.extra_batch_suffixes)))

    @property
    def all_batch_suffixes(self) -> Tuple[str, ...]:
        extra = tuple(s for s in self.extra_batch_suffixes if s not in self.batch_suffixes)
        return tuple(self.batch_suffixes) + extra

    @property
    def probe_suffixes(self) -> Tuple[str, ...]:
        """Suffixes tried, in order, when a bare command name has none"""
        return tuple(self.native_suffixes) + self.all_batch_suffixes

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> 'BridgeConfig':
        """
        Build configuration from WINBRIDGE_* variables.

        Raises:
            ValueError: on an invalid value
        """
        kwargs = {}
        if environ.get('WINBRIDGE_MOUNT_ROOT'):
            kwargs['mount_root'] = environ['WINBRIDGE_MOUNT_ROOT']
        if environ.get('WINBRIDGE_UNC_STRATEGY'):
            kwargs['unc_strategy'] = environ['WINBRIDGE_UNC_STRATEGY'].strip().lower()
        if environ.get('WINBRIDGE_UNC_HOST'):
            kwargs['unc_host'] = environ['WINBRIDGE_UNC_HOST']
        if environ.get(constants.DISTRO_VARIABLE):
            kwargs['distro_name'] = environ[constants.DISTRO_VARIABLE]
        if environ.get('WINBRIDGE_WSLPATH'):
            kwargs['wslpath_command'] = environ['WINBRIDGE_WSLPATH']
        if environ.get('WINBRIDGE_INTERPRETER'):
            kwargs['interpreter'] = environ['WINBRIDGE_INTERPRETER']
        if environ.get('WINBRIDGE_BATCH_SUFFIXES'):
            kwargs['extra_batch_suffixes'] = parse_suffixes(environ['WINBRIDGE_BATCH_SUFFIXES'])
        if environ.get('WINBRIDGE_PIPE_STDIO'):
            kwargs['pipe_stdio'] = environ['WINBRIDGE_PIPE_STDIO'].strip().lower()
        if 'WINBRIDGE_EXPORT_WSLENV' in environ:
            kwargs['export_wslenv'] = _parse_bool(environ['WINBRIDGE_EXPORT_WSLENV'])
        return cls(**kwargs)
