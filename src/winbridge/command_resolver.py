"""
Command Resolver - find the file a command token names

STRATEGY:
1. Native path (C:\\..., \\\\host\\...)  → back-translate, must exist
2. Path-like token (contains '/')     → relative to the caller's cwd
3. Bare name with a suffix            → PATH lookup as-is
4. Bare name without a suffix         → PATH lookup of name + suffix,
                                        probing .exe .com .bat .cmd in order

UNC WORKING DIRECTORY:
cmd.exe cannot use a UNC path as its working directory. When the caller's
cwd is not on a mounted drive, batch candidates are skipped while probing
and a later native candidate wins. If only batch candidates exist the
lookup fails with UnsupportedTargetError instead of launching a script
that would run in the wrong directory.
"""
import logging
import ntpath
import shutil
from typing import Mapping, Optional

from .config import BridgeConfig
from .errors import PathResolutionError, UnsupportedTargetError
from .launch_plan import ResolvedTarget
from .path_translator import PathTranslator


class CommandResolver:
    """Resolve the command of an InvocationRequest to a ResolvedTarget"""

    def __init__(self, path_translator: PathTranslator,
                 config: BridgeConfig = None,
                 logger: logging.Logger = None):
        self.path_translator = path_translator
        self.config = config or path_translator.config
        self.logger = logger or logging.getLogger('CommandResolver')

    def resolve(self, command: str, cwd: str, env: Mapping[str, str]) -> ResolvedTarget:
        """
        Args:
            command: command token as supplied by the caller
            cwd: caller's working directory (Linux form)
            env: caller's environment (PATH is used for lookup)

        Raises:
            PathResolutionError: command not found
            UnsupportedTargetError: only batch candidates found from a UNC cwd
            PathTranslationAmbiguous: found, but no native form available
        """
        if not command:
            raise PathResolutionError("Empty command")

        if PathTranslator.is_native_path(command) or '/' in command:
            return self.path_translator.resolve(command, cwd)

        search_path = env.get('PATH', '')
        _, suffix = ntpath.splitext(command)
        if suffix:
            found = self._which(command, search_path, cwd)
            if found is None:
                raise PathResolutionError(f"Command '{command}' not found", path=command)
            return self.path_translator.resolve(found, cwd)

        return self._probe_suffixes(command, search_path, cwd)

    def _probe_suffixes(self, command: str, search_path: str, cwd: str) -> ResolvedTarget:
        batch_suffixes = self.config.all_batch_suffixes
        cwd_on_drive = self.path_translator.is_mounted_drive_path(cwd)
        skipped = None

        for suffix in self.config.probe_suffixes:
            candidate = self._which(command + suffix, search_path, cwd)
            if candidate is None:
                continue
            if suffix in batch_suffixes and not cwd_on_drive:
                self.logger.debug(f"Skipping {candidate}: batch script from UNC cwd {cwd}")
                skipped = skipped or candidate
                continue
            self.logger.debug(f"Command '{command}' found: {candidate}")
            return self.path_translator.resolve(candidate, cwd)

        if skipped is not None:
            raise UnsupportedTargetError(
                f"Command '{skipped}' found but cannot be executed from a UNC "
                f"working directory ({cwd}). Use a native executable or run from "
                f"a mounted drive.",
                path=skipped,
            )
        raise PathResolutionError(f"Command '{command}' not found", path=command)

    def _which(self, name: str, search_path: str, cwd: str) -> Optional[str]:
        found = shutil.which(name, path=search_path)
        if found is None:
            return None
        # Relative PATH entries are relative to the caller's cwd
        if not found.startswith('/'):
            found = f"{cwd.rstrip('/')}/{found}"
        return found
