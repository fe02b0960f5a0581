"""
winbridge - invoke Windows executables from WSL

Main components:
- WindowsBridge: Main orchestrator
- PathTranslator: Path translation between Linux and Windows views
- CommandResolver: PATH lookup and suffix probing
- TargetClassifier: Launch strategy from the file suffix
- ArgumentEncoder: Windows command-line quoting and LaunchPlan
- EnvironmentBridge: Environment and working directory translation
- ProcessLauncher: Process creation and stdio forwarding
"""

from .argument_encoder import ArgumentEncoder, quote_argument, quote_for_interpreter
from .bridge import WindowsBridge
from .command_resolver import CommandResolver
from .config import BridgeConfig
from .environment_bridge import EnvironmentBridge
from .errors import (BridgeError, EnvironmentTranslationWarning, LaunchFailure,
                     PathResolutionError, PathTranslationAmbiguous,
                     UnsupportedTargetError)
from .launch_plan import (BridgedEnvironment, ExitOutcome, InvocationRequest,
                          LaunchKind, LaunchPlan, PathOrigin, ResolvedTarget)
from .path_translator import (BuiltinUncStrategy, PathTranslator, UncStrategy,
                              WslpathUncStrategy)
from .process_launcher import ProcessLauncher
from .target_classifier import TargetClassifier

__version__ = '0.1.0'

__all__ = [
    'WindowsBridge',
    'BridgeConfig',
    'PathTranslator',
    'UncStrategy',
    'BuiltinUncStrategy',
    'WslpathUncStrategy',
    'CommandResolver',
    'TargetClassifier',
    'ArgumentEncoder',
    'quote_argument',
    'quote_for_interpreter',
    'EnvironmentBridge',
    'ProcessLauncher',
    'InvocationRequest',
    'ResolvedTarget',
    'LaunchPlan',
    'BridgedEnvironment',
    'ExitOutcome',
    'PathOrigin',
    'LaunchKind',
    'BridgeError',
    'PathResolutionError',
    'PathTranslationAmbiguous',
    'UnsupportedTargetError',
    'LaunchFailure',
    'EnvironmentTranslationWarning',
]
