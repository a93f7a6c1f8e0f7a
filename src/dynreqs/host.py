"""Host context: everything predicates learn about the machine they run on.

Predicates never touch ``sys``, ``os.environ`` or the terminal directly;
they go through a HostContext. SystemHost is the real implementation, and
tests substitute a fake to get deterministic answers on any machine.
"""

from __future__ import annotations

import importlib.metadata
import importlib.util
import os
import platform
import shlex
import shutil
import stat
import subprocess
import sys
import sysconfig
import tempfile
from typing import IO, Protocol

import click

from dynreqs.build_config import ConfigAccessor
from dynreqs.constants import USE_DEFAULT_ENV_VARS
from dynreqs.logging import get_logger

__all__ = ["HostContext", "SystemHost", "classify_os_type", "is_true"]

logger = get_logger(__name__)

# Seconds a compile check may take
_COMPILE_TIMEOUT = 60

_COMPILE_CHECK_SOURCE = """\
#include <Python.h>

int dynreqs_compile_check(void) { return PY_MAJOR_VERSION; }
"""

# sys.platform prefixes mapped to their OS family
_OS_TYPES: dict[str, str] = {
    "aix": "Unix",
    "android": "Unix",
    "cygwin": "Unix",
    "darwin": "Unix",
    "dragonfly": "Unix",
    "emscripten": "Unix",
    "freebsd": "Unix",
    "haiku": "Unix",
    "hp-ux": "Unix",
    "ios": "Unix",
    "linux": "Unix",
    "midnightbsd": "Unix",
    "msys": "Unix",
    "netbsd": "Unix",
    "openbsd": "Unix",
    "sunos": "Unix",
    "wasi": "Unix",
    "win32": "Windows",
}


def classify_os_type(os_name: str) -> str | None:
    """Classify a ``sys.platform`` value into its OS family.

    Args:
        os_name: Platform identifier such as "linux", "darwin" or "win32".

    Returns:
        "Unix" or "Windows", or None for platforms that are not recognised.

    Examples:
        >>> classify_os_type("freebsd14")
        'Unix'
        >>> classify_os_type("plan9") is None
        True
    """
    if os_name in _OS_TYPES:
        return _OS_TYPES[os_name]
    # Platforms such as "freebsd14" carry a release suffix
    for prefix, os_type in _OS_TYPES.items():
        if os_name.startswith(prefix):
            return os_type
    return None


def is_true(value: object) -> bool:
    """Truthiness for configuration values and environment variables.

    None, "", "0", 0 and False are false; everything else is true.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


class HostContext(Protocol):
    """Protocol for the host facts predicates consult."""

    def os_name(self) -> str: ...

    def interpreter_version(self) -> str: ...

    def getenv(self, key: str) -> str | None: ...

    def which(self, command: str) -> str | None: ...

    def find_installed_version(self, module: str) -> str | None:
        """Return the installed version of a module or distribution, or None."""
        ...

    def module_exists(self, module: str) -> bool: ...

    def can_compile(self, config: ConfigAccessor) -> bool:
        """Return True if a native compiler can build extensions."""
        ...

    def read_line(self) -> str | None:
        """Read one answer line, or None when the default should be used."""
        ...

    def write(self, text: str) -> None: ...


class SystemHost:
    """HostContext backed by the running interpreter and operating system.

    Args:
        use_default: Answer every interactive prompt with its default.
        stdin: Stream prompts read from (defaults to sys.stdin).
        stdout: Stream prompts are written to (defaults to sys.stdout).
    """

    def __init__(
        self,
        *,
        use_default: bool = False,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        self._use_default = use_default
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> IO[str]:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> IO[str]:
        return self._stdout if self._stdout is not None else sys.stdout

    def os_name(self) -> str:
        return sys.platform

    def interpreter_version(self) -> str:
        return platform.python_version()

    def getenv(self, key: str) -> str | None:
        return os.environ.get(key)

    def which(self, command: str) -> str | None:
        return shutil.which(command)

    def find_installed_version(self, module: str) -> str | None:
        """Return the installed version of a module.

        ``module`` may be a distribution name ("PyYAML") or an import name
        ("yaml"); import names are mapped to the distributions that provide
        their top-level package.
        """
        try:
            return importlib.metadata.version(module)
        except importlib.metadata.PackageNotFoundError:
            pass

        top_level = module.partition(".")[0]
        for dist in importlib.metadata.packages_distributions().get(top_level, []):
            try:
                return importlib.metadata.version(dist)
            except importlib.metadata.PackageNotFoundError:
                continue
        return None

    def module_exists(self, module: str) -> bool:
        if self.find_installed_version(module) is not None:
            return True
        try:
            return importlib.util.find_spec(module) is not None
        except (ImportError, ValueError) as e:
            logger.debug("module_lookup_failed", module=module, error=str(e))
            return False

    def can_compile(self, config: ConfigAccessor) -> bool:
        """Compile a minimal extension source to prove the toolchain works.

        The compiler comes from ``CC`` in the environment, then the build
        configuration, and falls back to ``cl`` on Windows. It must resolve
        on the search path and compile against the interpreter's headers.
        """
        compiler = self.getenv("CC") or config.get("CC")
        if not compiler and self.os_name() == "win32":
            compiler = "cl"
        if not compiler:
            return False
        try:
            argv = shlex.split(str(compiler))
        except ValueError:
            return False
        if not argv or self.which(argv[0]) is None:
            logger.debug("compiler_not_found", compiler=compiler)
            return False

        include_dir = sysconfig.get_paths()["include"]
        with tempfile.TemporaryDirectory(prefix="dynreqs-") as tmp:
            source = os.path.join(tmp, "check.c")
            with open(source, "w", encoding="utf-8") as f:
                f.write(_COMPILE_CHECK_SOURCE)
            if os.path.basename(argv[0]).lower() in ("cl", "cl.exe"):
                obj = os.path.join(tmp, "check.obj")
                argv += ["/nologo", f"/I{include_dir}", "/c", source, f"/Fo{obj}"]
            else:
                obj = os.path.join(tmp, "check.o")
                argv += ["-I", include_dir, "-c", source, "-o", obj]

            try:
                result = subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    timeout=_COMPILE_TIMEOUT,
                )
            except subprocess.TimeoutExpired:
                logger.debug("compile_check_timed_out", compiler=compiler)
                return False
            except OSError as e:
                logger.debug("compile_check_failed", compiler=compiler, error=str(e))
                return False

        if result.returncode != 0:
            logger.debug(
                "compile_check_failed",
                compiler=compiler,
                stderr=result.stderr.strip(),
            )
            return False
        return True

    def use_default(self) -> bool:
        if self._use_default:
            return True
        return any(is_true(self.getenv(name)) for name in USE_DEFAULT_ENV_VARS)

    def is_interactive(self) -> bool:
        """Whether prompts can expect a human on the other end.

        Standard input must be a terminal. Standard output must be a
        terminal too, unless it is a pipe (output piped through a pager).
        """
        try:
            if not os.isatty(self.stdin.fileno()):
                return False
            out_fd = self.stdout.fileno()
            if os.isatty(out_fd):
                return True
            mode = os.fstat(out_fd).st_mode
        except (OSError, ValueError, AttributeError):
            return False
        return not (stat.S_ISREG(mode) or stat.S_ISCHR(mode))

    def read_line(self) -> str | None:
        """Read one answer from standard input.

        Piped answers are read too. None (use the default) is returned when
        defaults are forced, at end of input, or for an empty piped line.
        """
        if self.use_default():
            return None
        interactive = self.is_interactive()
        line = self.stdin.readline()
        if not line:
            # End of input: nobody is going to answer
            return None
        answer = line.rstrip("\r\n")
        if not interactive:
            if not answer:
                return None
            # Piped answers are not echoed by a terminal
            self.write(f"{answer}\n")
        return answer

    def write(self, text: str) -> None:
        click.echo(text, file=self.stdout, nl=False)
        self.stdout.flush()
