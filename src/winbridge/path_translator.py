"""
Path Translator - Linux/Windows path translation for WSL

ARCHITECTURE:
The caller works with Linux paths (its natural view of the filesystem).
The child runs on Windows and needs native paths.

MOUNTED DRIVES (deterministic, no lookup):
/mnt/c/tools/foo.exe          → C:\\tools\\foo.exe
/mnt/d                        → D:\\

EVERYTHING ELSE (ambiguous):
/home/user/proj/run.bat       → realpath → still not on a drive →
                                \\\\wsl.localhost\\Ubuntu\\home\\user\\proj\\run.bat
/home/user/link-to-c/foo.exe  → realpath = /mnt/c/foo.exe → C:\\foo.exe

The UNC step is a pluggable strategy (UncStrategy):
- BuiltinUncStrategy: builds \\\\<host>\\<distro>\\<rest> itself
- WslpathUncStrategy: delegates to the external `wslpath -w` utility
Both raise PathTranslationAmbiguous when they cannot produce a native path.

REVERSE DIRECTION (native → Linux, best effort):
C:\\Users\\me                  → /mnt/c/Users/me
\\\\wsl.localhost\\Ubuntu\\tmp    → /tmp   (only for this distro)
\\\\server\\share\\x              → unchanged

RESPONSIBILITIES:
- Pure translation in both directions (to_windows / to_unix)
- Resolution of an existing path into a ResolvedTarget (resolve)

NOT RESPONSIBLE FOR:
- PATH lookup of bare command names (done by CommandResolver)
- Environment variable heuristics (done by EnvironmentBridge)

ERRORS:
- PathResolutionError: the path names nothing on disk (resolve only)
- PathTranslationAmbiguous: no mounted drive and the UNC strategy failed
"""
import logging
import ntpath
import os
import posixpath
import re
import subprocess
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from . import constants
from .config import BridgeConfig
from .errors import PathResolutionError, PathTranslationAmbiguous
from .launch_plan import PathOrigin, ResolvedTarget


# ============================================================================
# UNC FALLBACK STRATEGIES
# ============================================================================

class UncStrategy(ABC):
    """Translate a Linux-only path (not under a mounted drive) to native form"""

    name = ''

    @abstractmethod
    def to_windows(self, linux_path: str) -> str:
        """
        Args:
            linux_path: absolute, canonical Linux path

        Returns:
            Native path addressing the same entry from Windows

        Raises:
            PathTranslationAmbiguous: if no native form can be produced
        """


class BuiltinUncStrategy(UncStrategy):
    """\\\\<host>\\<distro>\\<rest> addressing of the Linux filesystem"""

    name = constants.UNC_STRATEGY_BUILTIN

    def __init__(self, distro_name: Optional[str], host: str = constants.DEFAULT_UNC_HOST):
        self.distro_name = distro_name
        self.host = host

    def to_windows(self, linux_path: str) -> str:
        if not self.distro_name:
            raise PathTranslationAmbiguous(
                f"Cannot build UNC path for {linux_path}: distribution name unknown "
                f"(set {constants.DISTRO_VARIABLE})",
                path=linux_path,
            )
        rest = linux_path.strip('/').replace('/', '\\')
        return f"\\\\{self.host}\\{self.distro_name}\\{rest}"


class WslpathUncStrategy(UncStrategy):
    """Delegate to `wslpath -w <path>`"""

    name = constants.UNC_STRATEGY_WSLPATH

    def __init__(self, command: str = constants.DEFAULT_WSLPATH_COMMAND,
                 timeout: float = constants.WSLPATH_TIMEOUT,
                 logger: logging.Logger = None):
        self.command = command
        self.timeout = timeout
        self.logger = logger or logging.getLogger('WslpathUncStrategy')

    def to_windows(self, linux_path: str) -> str:
        self.logger.debug(f"Delegating to {self.command} -w {linux_path}")
        try:
            result = subprocess.run(
                [self.command, '-w', linux_path],
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise PathTranslationAmbiguous(
                f"{self.command} failed for {linux_path}: {e}", path=linux_path
            ) from e

        native = result.stdout.strip()
        if result.returncode != 0 or not native:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise PathTranslationAmbiguous(
                f"{self.command} could not translate {linux_path}: {detail}", path=linux_path
            )
        return native


def create_unc_strategy(config: BridgeConfig, logger: logging.Logger = None) -> UncStrategy:
    """Build the UNC strategy selected by configuration"""
    if config.unc_strategy == constants.UNC_STRATEGY_WSLPATH:
        return WslpathUncStrategy(config.wslpath_command, logger=logger)
    return BuiltinUncStrategy(config.distro_name, config.unc_host)


# ============================================================================
# PATH TRANSLATOR
# ============================================================================

_DRIVE_PATTERN = re.compile(r'^([A-Za-z]):(?:[\\/](.*))?$', re.DOTALL)
_UNC_PATTERN = re.compile(r'^[\\/]{2}([^\\/]+)[\\/]+([^\\/]+)(?:[\\/]+(.*))?$', re.DOTALL)


class PathTranslator:
    """
    Linux↔Windows path translation.

    Stateless apart from configuration: every call recomputes its answer,
    so a replaced file or symlink is always seen as it is now.
    """

    def __init__(self, config: BridgeConfig = None,
                 unc_strategy: UncStrategy = None,
                 logger: logging.Logger = None):
        self.config = config or BridgeConfig()
        self.logger = logger or logging.getLogger('PathTranslator')
        self.unc_strategy = unc_strategy or create_unc_strategy(self.config, logger=logger)

        root = self.config.mount_root.rstrip('/')
        self.mount_prefix = root
        self._mounted_pattern = re.compile(
            rf'^{re.escape(root)}/([A-Za-z])(?:/(.*))?$', re.DOTALL
        )

    # ========== CLASSIFICATION ==========

    def is_mounted_drive_path(self, linux_path: str) -> bool:
        """True for <mount_root>/<letter>[/...]"""
        return self._mounted_pattern.match(posixpath.normpath(linux_path)) is not None

    @staticmethod
    def is_native_path(value: str) -> bool:
        """True for C:\\..., C:/... and \\\\host\\share\\... forms"""
        if _DRIVE_PATTERN.match(value):
            return True
        return value.startswith('\\\\')

    # ========== LINUX → WINDOWS ==========

    def mounted_drive_to_windows(self, linux_path: str) -> Optional[str]:
        """
        Deterministic mounted-drive mapping.

        Returns:
            C:\\rest for /mnt/c/rest, None if the path is not on a mounted drive
        """
        match = self._mounted_pattern.match(posixpath.normpath(linux_path))
        if not match:
            return None
        letter = match.group(1).upper()
        rest = (match.group(2) or '').replace('/', '\\')
        return f"{letter}:\\{rest}"

    def to_windows(self, linux_path: str) -> Tuple[str, PathOrigin]:
        """
        Translate an absolute Linux path → native path.

        Args:
            linux_path: absolute Linux path (need not exist for mounted drives)

        Returns:
            (native_path, origin)

        Raises:
            ValueError: if the path is relative
            PathTranslationAmbiguous: if the UNC fallback fails
        """
        if not linux_path.startswith('/'):
            raise ValueError(f"Expected an absolute Linux path, got: {linux_path}")

        native = self.mounted_drive_to_windows(linux_path)
        if native is not None:
            return native, PathOrigin.MOUNTED_DRIVE

        # Ambiguous: symlinks may still lead onto a mounted drive
        real = os.path.realpath(linux_path)
        native = self.mounted_drive_to_windows(real)
        if native is not None:
            self.logger.debug(f"{linux_path} resolves onto a mounted drive: {real}")
            return native, PathOrigin.MOUNTED_DRIVE

        native = self.unc_strategy.to_windows(real)
        self.logger.debug(f"UNC fallback ({self.unc_strategy.name}): {linux_path} → {native}")
        return native, PathOrigin.UNC_OR_OTHER

    # ========== WINDOWS → LINUX ==========

    def to_unix(self, native_path: str) -> str:
        """
        Translate a native path → Linux path (best effort).

        Drive paths map to the mount form, UNC paths into this distribution
        map to the Linux path they name. Anything else is returned unchanged.
        """
        match = _DRIVE_PATTERN.match(native_path)
        if match:
            letter = match.group(1).lower()
            rest = (match.group(2) or '').replace('\\', '/').strip('/')
            base = f"{self.mount_prefix}/{letter}"
            return f"{base}/{rest}" if rest else base

        match = _UNC_PATTERN.match(native_path)
        if match and self._is_own_share(match.group(1), match.group(2)):
            rest = (match.group(3) or '').replace('\\', '/').strip('/')
            return f"/{rest}"

        return native_path

    def _is_own_share(self, host: str, share: str) -> bool:
        distro = self.config.distro_name
        if not distro:
            return False
        return host.lower() in constants.UNC_HOSTS and share.lower() == distro.lower()

    # ========== RESOLUTION ==========

    def resolve(self, path: str, cwd: str = '/') -> ResolvedTarget:
        """
        Resolve a path in either representation to an existing target.

        Args:
            path: Linux path (absolute or relative to cwd) or native path
            cwd: caller's working directory for relative paths

        Returns:
            ResolvedTarget

        Raises:
            PathResolutionError: nothing exists at that path on either side
            PathTranslationAmbiguous: exists, but no native form available
        """
        if self.is_native_path(path):
            linux_path = self.to_unix(path)
            if linux_path == path:
                raise PathResolutionError(
                    f"'{path}' has no Linux-side location to check", path=path
                )
        else:
            linux_path = posixpath.abspath(posixpath.join(cwd, path))

        if not os.path.exists(linux_path):
            raise PathResolutionError(f"'{path}' not found", path=path)

        native_path, origin = self.to_windows(linux_path)
        self.logger.debug(f"Resolved {path} → {native_path} ({origin.value})")
        return ResolvedTarget(native_path=native_path, linux_path=linux_path, origin=origin)

    @staticmethod
    def native_dirname(native_path: str) -> str:
        """Directory part of a native path"""
        return ntpath.dirname(native_path)
