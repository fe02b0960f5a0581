"""
Environment Bridge - environment and working directory for the child

RESPONSIBILITIES:
- Translate path-valued variables to native form
    HOME=/mnt/c/Users/me          → C:\\Users\\me
    PROJECT=/home/me/proj         → \\\\wsl.localhost\\Ubuntu\\home\\me\\proj
    TOOLS=/mnt/c/bin:/mnt/d/bin   → C:\\bin;D:\\bin
- Pass every other variable through unchanged (the environment is never pruned),
  PATH and WSLENV included (WSL interop converts PATH itself)
- Share translated variables with the Windows side through WSLENV
- Translate the working directory, falling back to the target's directory

NOT RESPONSIBLE FOR:
- Path translation rules (done by PathTranslator)
- Launching (done by ProcessLauncher)

FAILURE POLICY:
Nothing here aborts an invocation. A value that cannot be translated is
passed verbatim and reported as an EnvironmentTranslationWarning (logged
and collected on BridgedEnvironment.warnings).
"""
import logging
import os
import posixpath
from typing import Dict, List, Mapping, Optional, Tuple

from . import constants
from .config import BridgeConfig
from .errors import EnvironmentTranslationWarning, PathTranslationAmbiguous
from .launch_plan import (BridgedEnvironment, LaunchKind, PathOrigin,
                          ResolvedTarget)
from .path_translator import PathTranslator

# WSLENV flags that ask WSL to translate the value itself
_WSLENV_PATH_FLAGS = ('p', 'l')


class EnvironmentBridge:

    def __init__(self, path_translator: PathTranslator,
                 config: BridgeConfig = None,
                 logger: logging.Logger = None):
        self.path_translator = path_translator
        self.config = config or path_translator.config
        self.logger = logger or logging.getLogger('EnvironmentBridge')

    def bridge(self, env: Mapping[str, str], cwd: str,
               target: ResolvedTarget, kind: LaunchKind) -> BridgedEnvironment:
        """
        Args:
            env: caller's environment
            cwd: caller's working directory (Linux form)
            target: resolved target (cwd fallback)
            kind: launch kind (cmd.exe refuses UNC working directories)
        """
        bridged: Dict[str, str] = {}
        translated: List[str] = []
        warnings: List[EnvironmentTranslationWarning] = []

        for name, value in env.items():
            if name in constants.PASSTHROUGH_VARIABLES:
                bridged[name] = value
                continue
            new_value, warning = self.translate_value(name, value)
            bridged[name] = new_value
            if warning is not None:
                self.logger.warning(f"Passing {name} verbatim: {warning.reason}")
                warnings.append(warning)
            if new_value != value:
                translated.append(name)

        if self.config.export_wslenv and translated:
            bridged[constants.WSLENV_VARIABLE] = self.extend_wslenv(
                env.get(constants.WSLENV_VARIABLE, ''), translated
            )

        native_cwd, linux_cwd = self._bridge_cwd(cwd, target, kind, warnings)

        self.logger.debug(f"Translated {len(translated)} variable(s): {', '.join(translated)}")
        return BridgedEnvironment(
            env=bridged,
            cwd=native_cwd,
            linux_cwd=linux_cwd,
            translated=tuple(translated),
            warnings=tuple(warnings),
        )

    # ========== VARIABLES ==========

    def translate_value(self, name: str, value: str) -> Tuple[str, Optional[EnvironmentTranslationWarning]]:
        """
        Returns:
            (value to hand to the child, warning or None)
        """
        if not value.startswith('/'):
            # Native paths, URLs, flags, plain words
            return value, None

        delimiter = self._list_delimiter(value)
        if delimiter is None:
            try:
                return self._translate_path(value), None
            except PathTranslationAmbiguous as e:
                return value, EnvironmentTranslationWarning(name, value, e.message)

        elements = value.split(delimiter)
        if not all(element == '' or element.startswith('/') for element in elements):
            # e.g. "/opt/app:8080" is not a search path
            return value, None

        failures = []
        native_elements = []
        for element in elements:
            if not element:
                native_elements.append(element)
                continue
            try:
                native_elements.append(self._translate_path(element))
            except PathTranslationAmbiguous as e:
                failures.append(e.message)
                native_elements.append(element)

        if failures:
            return value, EnvironmentTranslationWarning(name, value, '; '.join(failures))
        return constants.NATIVE_LIST_DELIMITER.join(native_elements), None

    def _translate_path(self, linux_path: str) -> str:
        native = self.path_translator.mounted_drive_to_windows(linux_path)
        if native is not None:
            return native
        if not os.path.exists(linux_path):
            # Not reachable from the Linux side: nothing to translate
            return linux_path
        native, _ = self.path_translator.to_windows(linux_path)
        return native

    @staticmethod
    def _list_delimiter(value: str) -> Optional[str]:
        if constants.NATIVE_LIST_DELIMITER in value:
            return constants.NATIVE_LIST_DELIMITER
        if constants.LINUX_LIST_DELIMITER in value:
            return constants.LINUX_LIST_DELIMITER
        return None

    @staticmethod
    def extend_wslenv(existing: str, names: List[str]) -> str:
        """
        Add names to a WSLENV value.

        Translated variables already hold native values, so /p and /l flags
        on them are dropped (WSL would translate them a second time).
        """
        entries = [entry for entry in existing.split(':') if entry]
        present = {}
        for index, entry in enumerate(entries):
            present[entry.split('/', 1)[0]] = index

        for name in names:
            if name == constants.WSLENV_VARIABLE:
                continue
            if name in present:
                entry = entries[present[name]]
                var, _, flags = entry.partition('/')
                flags = ''.join(f for f in flags if f not in _WSLENV_PATH_FLAGS)
                entries[present[name]] = f"{var}/{flags}" if flags else var
            else:
                present[name] = len(entries)
                entries.append(name)
        return ':'.join(entries)

    # ========== WORKING DIRECTORY ==========

    def _bridge_cwd(self, cwd: str, target: ResolvedTarget, kind: LaunchKind,
                    warnings: List[EnvironmentTranslationWarning]) -> Tuple[str, str]:
        try:
            native, origin = self.path_translator.to_windows(cwd)
        except (PathTranslationAmbiguous, ValueError) as e:
            reason = f"working directory not translatable ({e}), using target directory"
            self.logger.warning(f"{cwd}: {reason}")
            warnings.append(EnvironmentTranslationWarning('cwd', cwd, reason))
            return self._target_directory(target)

        if (kind is LaunchKind.INTERPRETER_WRAPPED
                and origin is PathOrigin.UNC_OR_OTHER and target.is_mounted):
            reason = "command interpreter cannot use a UNC working directory, using target directory"
            self.logger.warning(f"{cwd}: {reason}")
            warnings.append(EnvironmentTranslationWarning('cwd', cwd, reason))
            return self._target_directory(target)

        return native, cwd

    def _target_directory(self, target: ResolvedTarget) -> Tuple[str, str]:
        return (
            PathTranslator.native_dirname(target.native_path),
            posixpath.dirname(target.linux_path),
        )
