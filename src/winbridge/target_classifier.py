"""
Target Classifier - choose the launch strategy from the file suffix

Suffix only, case-insensitive, the way Windows associates files:
- .exe .com           → DIRECT_NATIVE
- .bat .cmd (+extra)  → INTERPRETER_WRAPPED
- anything else       → UnsupportedTargetError

No content sniffing: a shebang or an MZ header does not change the answer.
"""
import logging
import ntpath

from .config import BridgeConfig
from .errors import UnsupportedTargetError
from .launch_plan import LaunchKind, ResolvedTarget


class TargetClassifier:

    def __init__(self, config: BridgeConfig = None, logger: logging.Logger = None):
        self.config = config or BridgeConfig()
        self.logger = logger or logging.getLogger('TargetClassifier')

    def classify(self, target: ResolvedTarget) -> LaunchKind:
        """
        Raises:
            UnsupportedTargetError: suffix missing or not recognized
        """
        _, suffix = ntpath.splitext(target.native_path)
        suffix = suffix.lower()

        if suffix in self.config.native_suffixes:
            kind = LaunchKind.DIRECT_NATIVE
        elif suffix in self.config.all_batch_suffixes:
            kind = LaunchKind.INTERPRETER_WRAPPED
        else:
            supported = ', '.join(self.config.native_suffixes + self.config.all_batch_suffixes)
            reason = f"suffix '{suffix}'" if suffix else "no suffix"
            raise UnsupportedTargetError(
                f"Cannot launch '{target.native_path}': {reason} (supported: {supported})",
                path=target.native_path,
            )

        self.logger.debug(f"{target.native_path} → {kind.value}")
        return kind
