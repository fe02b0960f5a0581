"""
Windows Bridge - main orchestrator (thin layer)

ARCHITECTURE:
This is the TOP-LEVEL ENTRY POINT for invoking a Windows program from WSL.
It is a THIN ORCHESTRATOR that delegates all work to specialized components.

Position in hierarchy:
    CLI (__main__) / library caller
       ↓
    WindowsBridge (this class) ← ORCHESTRATOR
       ↓
    ├── CommandResolver + PathTranslator ← what is the command, where is it natively
    ├── TargetClassifier                 ← DIRECT_NATIVE or INTERPRETER_WRAPPED
    ├── ArgumentEncoder                  ← LaunchPlan
    ├── EnvironmentBridge                ← BridgedEnvironment
    └── ProcessLauncher                  ← ExitOutcome

DATA FLOW:
    invoke(request) →
        1. CommandResolver.resolve(command, cwd, env) → ResolvedTarget
        2. TargetClassifier.classify(target) → LaunchKind
        3. ArgumentEncoder.build_plan(target, kind, args) → LaunchPlan
        4. EnvironmentBridge.bridge(env, cwd, target, kind) → BridgedEnvironment
        5. ProcessLauncher.launch(plan, bridged_env) → ExitOutcome

STATE:
None across invocations. Every invocation builds a fresh target, plan and
environment: a file replaced between two invocations is re-classified.

ERRORS:
prepare() raises the bridge error kinds. invoke() logs them and reports an
ExitOutcome with launched=False and the bridge-level exit status, so the
caller can tell "could not start" from "ran and failed".

USAGE PATTERN:
    bridge = WindowsBridge(BridgeConfig.from_env(os.environ))
    outcome = bridge.invoke(InvocationRequest('cl.exe', ('/nologo', 'a.c'),
                                              cwd=os.getcwd(), env=os.environ))
    sys.exit(outcome.process_exit_code)
"""
import logging
from typing import Tuple

from .argument_encoder import ArgumentEncoder
from .command_resolver import CommandResolver
from .config import BridgeConfig
from .environment_bridge import EnvironmentBridge
from .errors import BridgeError
from .launch_plan import (BridgedEnvironment, ExitOutcome, InvocationRequest,
                          LaunchPlan)
from .path_translator import PathTranslator, UncStrategy
from .process_launcher import ProcessLauncher
from .target_classifier import TargetClassifier


class WindowsBridge:
    """
    Invoke Windows executables and batch scripts from WSL.

    Components are built once from the configuration; none of them keeps
    per-invocation state.
    """

    def __init__(self, config: BridgeConfig = None,
                 unc_strategy: UncStrategy = None,
                 launcher: ProcessLauncher = None,
                 logger: logging.Logger = None):
        """
        Args:
            config: bridge configuration (default: built-in defaults)
            unc_strategy: override the UNC fallback chosen by configuration
            launcher: process launcher (default: caller's own stdio)
            logger: logger shared by all components
        """
        self.config = config or BridgeConfig()
        self.logger = logger or logging.getLogger('WindowsBridge')

        self.path_translator = PathTranslator(self.config, unc_strategy=unc_strategy, logger=logger)
        self.command_resolver = CommandResolver(self.path_translator, self.config, logger=logger)
        self.target_classifier = TargetClassifier(self.config, logger=logger)
        self.argument_encoder = ArgumentEncoder(self.config, logger=logger)
        self.environment_bridge = EnvironmentBridge(self.path_translator, self.config, logger=logger)
        self.launcher = launcher or ProcessLauncher(
            grace_period=self.config.terminate_grace_period,
            dry_run=self.config.dry_run,
            logger=logger,
        )

    def prepare(self, request: InvocationRequest) -> Tuple[LaunchPlan, BridgedEnvironment]:
        """
        Build the launch inputs for a request without launching.

        Raises:
            PathResolutionError, PathTranslationAmbiguous, UnsupportedTargetError
        """
        target = self.command_resolver.resolve(request.command, request.cwd, request.env)
        kind = self.target_classifier.classify(target)
        plan = self.argument_encoder.build_plan(target, kind, request.args)
        bridged_env = self.environment_bridge.bridge(request.env, request.cwd, target, kind)
        return plan, bridged_env

    def invoke(self, request: InvocationRequest) -> ExitOutcome:
        """
        Run the request to completion, streaming stdio live.

        Returns:
            ExitOutcome: child's status, or launched=False with the error
        """
        self.logger.debug(f"Invoking {request.command} with {len(request.args)} argument(s)")
        plan = None
        try:
            plan, bridged_env = self.prepare(request)
            return self.launcher.launch(plan, bridged_env)
        except BridgeError as e:
            self.logger.error(f"{type(e).__name__}: {e}")
            return ExitOutcome.launch_failed(e, plan=plan)
