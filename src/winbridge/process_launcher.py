"""
Process Launcher - single point of process creation

ARCHITECTURE:
This is the ONLY place where the bridge creates a process.

Position in hierarchy:
    WindowsBridge
       ↓
    ProcessLauncher ← THIS CLASS
       ↓
    subprocess.Popen([executable, *argv], cwd=..., env=...)

RESPONSIBILITIES:
1. Create the child from a LaunchPlan and a BridgedEnvironment (no shell)
2. Connect stdio:
   - plan.pipe_stdio=True  → three StreamForwarder threads; none outlives the child
     (the stdin forwarder is stopped, output forwarders drain to EOF)
   - plan.pipe_stdio=False → child inherits the caller's descriptors
3. Wait for the child, for as long as it runs (no timeout)
4. Propagate interruption: terminate() → grace period → kill()
5. Dry-run mode: log the plan, do not execute

NOT RESPONSIBLE FOR:
- Deciding what to launch (done by ArgumentEncoder)
- Environment translation (done by EnvironmentBridge)

FAILURE SEMANTICS:
- Process creation fails (missing interpreter, permission denied, target
  vanished) → LaunchFailure, immediately, no retry
- Child runs → its exit code is returned verbatim (negative = signal)

USAGE PATTERN:
    launcher = ProcessLauncher()
    outcome = launcher.launch(plan, bridged_env)
    sys.exit(outcome.process_exit_code)
"""
import logging
import subprocess
import sys
from typing import BinaryIO, List, Optional

from . import constants
from .errors import LaunchFailure
from .launch_plan import BridgedEnvironment, ExitOutcome, LaunchPlan
from .stream_forwarder import StreamForwarder


class ProcessLauncher:

    def __init__(self, stdin: Optional[BinaryIO] = None,
                 stdout: Optional[BinaryIO] = None,
                 stderr: Optional[BinaryIO] = None,
                 grace_period: float = constants.TERMINATE_GRACE_PERIOD,
                 dry_run: bool = False,
                 logger: logging.Logger = None):
        """
        Args:
            stdin/stdout/stderr: binary streams used when stdio is piped
                (default: the caller's own sys.std*.buffer)
            grace_period: seconds between terminate() and kill()
            dry_run: log the plan instead of executing it
        """
        self.stdin = stdin
        self.stdout = stdout
        self.stderr = stderr
        self.grace_period = grace_period
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger('ProcessLauncher')

    def launch(self, plan: LaunchPlan, bridged_env: BridgedEnvironment) -> ExitOutcome:
        """
        Raises:
            LaunchFailure: the process could not be created
        """
        command_line = plan.command_line()

        if self.dry_run:
            self.logger.info(f"[DRY RUN] {plan} (cwd={bridged_env.cwd})")
            return ExitOutcome(exit_code=0, plan=plan)

        self.logger.info(f"Launching {plan} (cwd={bridged_env.cwd})")
        source = self.stdin if self.stdin is not None else _caller_stream(sys.stdin)

        popen_kwargs = {
            'cwd': bridged_env.linux_cwd,
            'env': dict(bridged_env.env),
        }
        if plan.pipe_stdio:
            popen_kwargs.update(
                stdin=subprocess.PIPE if source is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )

        try:
            process = subprocess.Popen(command_line, **popen_kwargs)
        except OSError as e:
            raise LaunchFailure(f"Error starting '{plan.program}': {e}", path=plan.executable) from e

        forwarders = self._start_forwarders(process, source) if plan.pipe_stdio else []

        try:
            returncode = process.wait()
        except BaseException:
            self._terminate(process)
            self._finish_forwarders(process, forwarders, timeout=self.grace_period)
            raise

        self._finish_forwarders(process, forwarders)
        self.logger.debug(f"{plan.program} exited with {returncode}")
        return ExitOutcome(exit_code=returncode, plan=plan)

    # ========== STDIO ==========

    def _start_forwarders(self, process: subprocess.Popen,
                          source: Optional[BinaryIO]) -> List[StreamForwarder]:
        stdout = self.stdout if self.stdout is not None else _caller_stream(sys.stdout)
        stderr = self.stderr if self.stderr is not None else _caller_stream(sys.stderr)

        forwarders = [
            StreamForwarder('stdout', process.stdout, stdout, logger=self.logger),
            StreamForwarder('stderr', process.stderr, stderr, logger=self.logger),
        ]
        if source is not None:
            forwarders.append(StreamForwarder('stdin', source, process.stdin,
                                              close_sink=True, daemon=True,
                                              poll_interval=constants.INPUT_POLL_INTERVAL,
                                              logger=self.logger))
        for forwarder in forwarders:
            forwarder.start()
        return forwarders

    def _finish_forwarders(self, process: subprocess.Popen,
                           forwarders: List[StreamForwarder], timeout: float = None):
        """Invocation end: no forwarder outlives the child"""
        for forwarder in forwarders:
            if forwarder.stream_name == 'stdin':
                # Caller input is not consumed once the child is gone
                forwarder.stop()
                forwarder.join(self.grace_period)
                if forwarder.is_alive():
                    self.logger.debug(f"{forwarder.name} still blocked in read, detached")
                continue
            forwarder.join(timeout)
            if not forwarder.is_alive():
                forwarder.source.close()

        if process.stdin is not None and not process.stdin.closed:
            try:
                process.stdin.close()
            except OSError as e:
                self.logger.debug(f"Closing child stdin failed: {e}")

    # ========== INTERRUPTION ==========

    def _terminate(self, process: subprocess.Popen):
        """Terminate the child so it is not orphaned"""
        if process.poll() is not None:
            return
        self.logger.warning(f"Interrupted, terminating child process {process.pid}")
        process.terminate()
        try:
            process.wait(timeout=self.grace_period)
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Child process {process.pid} ignored terminate, killing")
            process.kill()
            process.wait()


def _caller_stream(stream) -> Optional[BinaryIO]:
    """Binary buffer behind a text stream (None if the caller has none)"""
    if stream is None:
        return None
    return getattr(stream, 'buffer', None)
