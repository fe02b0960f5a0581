"""
Constants and defaults for the Windows invocation bridge
"""

# ============================================================================
# MOUNTED DRIVES
# ============================================================================
# WSL automounts every Windows drive under a single root directory:
#   C:\  →  /mnt/c
#   D:\  →  /mnt/d
# The root is configurable in /etc/wsl.conf ([automount] root = ...).
DEFAULT_MOUNT_ROOT = '/mnt'


# ============================================================================
# UNC FALLBACK
# ============================================================================
# Linux-only paths are addressed from Windows through the 9P share:
#   /home/user/proj  →  \\wsl.localhost\Ubuntu\home\user\proj
# Older builds only expose the \\wsl$ host name.
DEFAULT_UNC_HOST = 'wsl.localhost'
UNC_HOSTS = ('wsl.localhost', 'wsl$')

UNC_STRATEGY_BUILTIN = 'builtin'
UNC_STRATEGY_WSLPATH = 'wslpath'
UNC_STRATEGIES = (UNC_STRATEGY_BUILTIN, UNC_STRATEGY_WSLPATH)

DEFAULT_WSLPATH_COMMAND = 'wslpath'
WSLPATH_TIMEOUT = 10  # seconds


# ============================================================================
# TARGET SUFFIXES
# ============================================================================
# Native formats are exec'd directly through WSL interop.
NATIVE_SUFFIXES = ('.exe', '.com')

# Batch scripts cannot be exec'd: cmd.exe must run them.
BATCH_SUFFIXES = ('.bat', '.cmd')


# ============================================================================
# COMMAND INTERPRETER
# ============================================================================
DEFAULT_INTERPRETER = 'cmd.exe'
INTERPRETER_RUN_FLAG = '/c'   # run the command, then terminate


# ============================================================================
# ENVIRONMENT
# ============================================================================
NATIVE_LIST_DELIMITER = ';'
LINUX_LIST_DELIMITER = ':'

# Variables listed in WSLENV are shared with Windows processes
WSLENV_VARIABLE = 'WSLENV'

# Never translated: process creation searches PATH on the Linux side,
# WSL interop converts it for the Windows child
PASSTHROUGH_VARIABLES = ('PATH', WSLENV_VARIABLE)
DISTRO_VARIABLE = 'WSL_DISTRO_NAME'


# ============================================================================
# PROCESS
# ============================================================================
PIPE_STDIO_AUTO = 'auto'
PIPE_STDIO_ALWAYS = 'always'
PIPE_STDIO_NEVER = 'never'
PIPE_STDIO_MODES = (PIPE_STDIO_AUTO, PIPE_STDIO_ALWAYS, PIPE_STDIO_NEVER)

FORWARD_CHUNK_SIZE = 64 * 1024
INPUT_POLL_INTERVAL = 0.05  # seconds between checks for the end of an invocation
TERMINATE_GRACE_PERIOD = 5.0  # seconds between terminate() and kill()


# ============================================================================
# BRIDGE-LEVEL EXIT STATUS
# ============================================================================
# Reported when the bridge itself could not start the program.
# Shell conventions: 127 = not found, 126 = found but not executable.
EXIT_PATH_RESOLUTION = 127
EXIT_LAUNCH_FAILURE = 126
EXIT_UNSUPPORTED_TARGET = 125
EXIT_TRANSLATION_AMBIGUOUS = 124
EXIT_USAGE = 2
