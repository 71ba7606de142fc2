"""Operating system and terminal detection helpers.

Usage:
    from utilkit import envutil

    if envutil.is_support_256color():
        ...
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence, TextIO

from .logging import get_logger

logger = get_logger("envutil")

CommandRunner = Callable[[Sequence[str]], str]

WSL_VERSION_FILE = Path("/proc/version")
WSL_MARKER = "Microsoft"

# Color-capable terminals whose TERM does not mention xterm.
SPECIAL_COLOR_TERMS = frozenset({"alacritty"})


def is_win() -> bool:
    """Windows system."""
    return sys.platform == "win32"


def is_windows() -> bool:
    """Alias of is_win()."""
    return is_win()


def is_mac() -> bool:
    return sys.platform == "darwin"


def is_linux() -> bool:
    return sys.platform.startswith("linux")


def is_msys(environ: Optional[Mapping[str, str]] = None) -> bool:
    """msys (MINGW64) environment, as set by git-bash and friends."""
    env = os.environ if environ is None else environ
    return env.get("MSYSTEM", "").startswith("MINGW")


class WSLDetector:
    """Reads the kernel version file once and remembers what it found."""

    def __init__(self, version_file: Path = WSL_VERSION_FILE) -> None:
        self.version_file = version_file
        self.detected = False
        self.contents = ""

    def detect(self) -> str:
        if not self.detected:
            try:
                with self.version_file.open("rb") as handle:
                    self.contents = handle.read(1024).decode("utf-8", errors="replace")
            except OSError as exc:
                logger.debug("Cannot read %s: %s", self.version_file, exc)
            self.detected = True
        return self.contents

    def is_wsl(self) -> bool:
        return WSL_MARKER in self.detect()

    def inject(self, contents: str) -> None:
        """Use ``contents`` as if they had been read from the version file."""
        self.contents = contents
        self.detected = True

    def reset(self) -> None:
        self.contents = ""
        self.detected = False


wsl_detector = WSLDetector()


def is_wsl() -> bool:
    """Windows Subsystem for Linux.

    See https://github.com/Microsoft/WSL/issues/423#issuecomment-221627364
    """
    return wsl_detector.is_wsl()


def is_terminal(fd: int) -> bool:
    """isatty check for a file descriptor."""
    try:
        return os.isatty(fd)
    except OSError:
        return False


def std_is_terminal() -> bool:
    """Whether stdout is a terminal."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return is_terminal(fd)


def is_console(out: TextIO) -> bool:
    """Whether ``out`` is the process stdout/stderr and attached to a terminal."""
    if out is not sys.stdout and out is not sys.stderr:
        return False
    try:
        return is_terminal(out.fileno())
    except (AttributeError, OSError, ValueError):
        return False


def _run_command(args: Sequence[str]) -> str:
    result = subprocess.run(
        list(args),
        check=True,
        capture_output=True,
        text=True,
        timeout=5,
    )
    return result.stdout


def has_shell_env(shell: str, runner: Optional[CommandRunner] = None) -> bool:
    """Whether ``shell`` can run a command, e.g. has_shell_env("bash")."""
    runner = runner or _run_command
    try:
        output = runner([shell, "-c", "echo OK"])
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Shell %s is unavailable: %s", shell, exc)
        return False
    return output.strip() == "OK"


def is_support_color(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the current console supports color.

    Supported: linux, mac, or windows's ConEmu, Cmder, putty, git-bash.exe.
    Not supported: windows cmd.exe, powerShell.exe.
    """
    env = os.environ if environ is None else environ
    term = env.get("TERM", "")
    if "xterm" in term:
        return True
    if term in SPECIAL_COLOR_TERMS:
        return True
    # ConEmu, e.g. "ConEmuANSI=ON"
    if env.get("ConEmuANSI") == "ON":
        return True
    # ANSICON, e.g. "ANSICON=189x2000 (189x43)"
    if env.get("ANSICON"):
        return True
    # 256-color support implies basic color.
    return is_support_256color(env)


def is_support_256color(environ: Optional[Mapping[str, str]] = None) -> bool:
    """TERM like xterm-256color, screen-256color, tmux-256color."""
    env = os.environ if environ is None else environ
    if "256color" in env.get("TERM", ""):
        return True
    return is_support_true_color(env)


def is_support_true_color(environ: Optional[Mapping[str, str]] = None) -> bool:
    """COLORTERM=truecolor."""
    env = os.environ if environ is None else environ
    return "truecolor" in env.get("COLORTERM", "")


__all__ = [
    "WSLDetector",
    "has_shell_env",
    "is_console",
    "is_linux",
    "is_mac",
    "is_msys",
    "is_support_256color",
    "is_support_color",
    "is_support_true_color",
    "is_terminal",
    "is_win",
    "is_windows",
    "is_wsl",
    "std_is_terminal",
    "wsl_detector",
]
