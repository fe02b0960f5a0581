"""
Error kinds raised by the invocation bridge

Every fatal kind carries the bridge-level exit status reported to the
caller, so "the bridge could not start your program" stays distinguishable
from "your program ran and failed".
"""
from . import constants


class BridgeError(Exception):
    """Base class for failures that prevent the child from being launched."""

    exit_code = 1

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.message = message
        self.path = path


class PathResolutionError(BridgeError):
    """The named command does not exist on either side."""

    exit_code = constants.EXIT_PATH_RESOLUTION


class PathTranslationAmbiguous(BridgeError):
    """A path is neither on a mounted drive nor convertible to UNC form."""

    exit_code = constants.EXIT_TRANSLATION_AMBIGUOUS


class UnsupportedTargetError(BridgeError):
    """The target is neither a native executable nor a batch script."""

    exit_code = constants.EXIT_UNSUPPORTED_TARGET


class LaunchFailure(BridgeError):
    """Process creation failed after a valid launch plan was built."""

    exit_code = constants.EXIT_LAUNCH_FAILURE


class EnvironmentTranslationWarning(UserWarning):
    """
    A path-like environment value could not be translated.

    Never raised: logged and collected on BridgedEnvironment.warnings.
    The value is passed to the child verbatim.
    """

    def __init__(self, name: str, value: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.value = value
        self.reason = reason
