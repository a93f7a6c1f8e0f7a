from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner

    from dynreqs.dynamic import DynamicPrereqs
    from dynreqs.predicates import PredicateRegistry


@dataclass
class FakeHost:
    """Deterministic HostContext for tests.

    Attributes:
        os: Value reported as the OS identifier.
        python_version: Value reported as the interpreter version.
        env: Environment variables.
        commands: Executables that resolve on the search path.
        modules: Installed modules mapped to their version (None when the
            module exists but carries no version metadata).
        answers: Lines returned by successive read_line() calls; None once
            exhausted (end of input).
        written: Everything written to the terminal.
    """

    os: str = "linux"
    python_version: str = "3.12.1"
    env: dict[str, str] = field(default_factory=dict)
    commands: set[str] = field(default_factory=set)
    modules: dict[str, str | None] = field(default_factory=dict)
    answers: list[str | None] = field(default_factory=list)
    written: list[str] = field(default_factory=list)

    def os_name(self) -> str:
        return self.os

    def interpreter_version(self) -> str:
        return self.python_version

    def getenv(self, key: str) -> str | None:
        return self.env.get(key)

    def which(self, command: str) -> str | None:
        return f"/usr/bin/{command}" if command in self.commands else None

    def find_installed_version(self, module: str) -> str | None:
        return self.modules.get(module)

    def module_exists(self, module: str) -> bool:
        return module in self.modules

    def can_compile(self, config: Any) -> bool:
        compiler = self.getenv("CC") or config.get("CC")
        if not compiler:
            return False
        return self.which(str(compiler).split()[0]) is not None

    def read_line(self) -> str | None:
        if not self.answers:
            return None
        return self.answers.pop(0)

    def write(self, text: str) -> None:
        self.written.append(text)

    @property
    def output(self) -> str:
        return "".join(self.written)


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Logs go to stderr at WARNING level so they never mix with the stdout
    that CLI tests assert on.
    """
    from dynreqs.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove DYNREQS_ and PERL_MM_USE_DEFAULT variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("DYNREQS_") or key == "PERL_MM_USE_DEFAULT":
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fake_host() -> FakeHost:
    """A Linux host running Python 3.12.1 with nothing installed."""
    return FakeHost()


@pytest.fixture
def registry() -> PredicateRegistry:
    """An independent copy of the built-in predicate registry."""
    from dynreqs.predicates import default_registry

    return default_registry.copy()


@pytest.fixture
def make_dynamic(
    fake_host: FakeHost,
) -> Callable[..., DynamicPrereqs]:
    """Factory for DynamicPrereqs bound to the fake host.

    Example:
        >>> def test_is_os(make_dynamic):
        ...     assert make_dynamic().evaluate("is_os linux")
    """
    from dynreqs.build_config import BuildConfig
    from dynreqs.dynamic import DynamicPrereqs

    def factory(**kwargs: Any) -> DynamicPrereqs:
        kwargs.setdefault("host", fake_host)
        kwargs.setdefault("config", BuildConfig())
        return DynamicPrereqs(**kwargs)

    return factory


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from dynreqs.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()
