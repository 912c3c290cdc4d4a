"""AIPA CLI -- generate, build, run and repair a program from a goal.

Exit status is 0 for every completed run, including one that exhausted
its attempts. Only fatal errors (workspace, I/O, closed input, LLM
client) exit with status 1.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import click
from dotenv import load_dotenv

from aipa._version import __version__
from aipa.cli.formatting import format_attempt, format_error, format_result, get_console
from aipa.exceptions import AipaError
from aipa.models.config import DEFAULT_SUBPROCESS_TIMEOUT, MAX_ATTEMPTS

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from aipa.repair.protocols import SourceFixer

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _parse_executables(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Turn repeated ``LANG=EXECUTABLE`` options into a mapping."""
    executables: dict[str, str] = {}
    for value in values:
        language, sep, executable = value.partition("=")
        if not sep or not language.strip() or not executable.strip():
            raise click.BadParameter(f"expected LANG=EXECUTABLE, got {value!r}")
        executables[language.strip().lower()] = executable.strip()
    return executables


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if debug:
        logging.getLogger("aipa").setLevel(logging.DEBUG)


@contextmanager
def _fixer_session(kind: str, model: str | None, console: Console) -> Iterator[SourceFixer]:
    """Yield the requested fixer, closing any LLM client on exit."""
    if kind == "llm":
        from aipa.llm.client import OpenAIClient
        from aipa.repair.llm import LLMFixer

        client = OpenAIClient(model=model)
        try:
            yield LLMFixer(client, model=model)
        finally:
            client.close()
        return

    from aipa.repair.interactive import InteractiveFixer

    yield InteractiveFixer(console=console)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-l", "--language", required=True, help="Programming language (e.g., rust, python, cpp).")
@click.option("-g", "--goal", required=True, help="Task goal (e.g., 'print hello').")
@click.option("-d", "--debug", is_flag=True, default=False, help="Enable debug output.")
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="AIPA_WORKSPACE",
    help="Workspace directory (default: ~/aipa_projects).",
)
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    default=MAX_ATTEMPTS,
    show_default=True,
    envvar="AIPA_MAX_ATTEMPTS",
    help="Execution attempts before giving up.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=DEFAULT_SUBPROCESS_TIMEOUT,
    show_default=True,
    envvar="AIPA_TIMEOUT",
    help="Seconds allowed per compiler or program process (0 disables).",
)
@click.option(
    "--fixer",
    type=click.Choice(["interactive", "llm"]),
    default="interactive",
    show_default=True,
    help="Who supplies corrected code after a failure.",
)
@click.option("--model", default=None, envvar="AIPA_MODEL", help="Model for the llm fixer.")
@click.option(
    "--exe",
    "executables",
    multiple=True,
    callback=_parse_executables,
    metavar="LANG=EXECUTABLE",
    help="Override a toolchain executable (repeatable), e.g. python=python3.12.",
)
@click.option(
    "--fail-fast-unsupported",
    is_flag=True,
    default=False,
    help="Stop immediately on an unsupported language instead of retrying.",
)
@click.version_option(__version__, prog_name="aipa")
def cli(
    language: str,
    goal: str,
    debug: bool,
    workspace: Path | None,
    max_attempts: int,
    timeout: float,
    fixer: str,
    model: str | None,
    executables: dict[str, str],
    fail_fast_unsupported: bool,
) -> None:
    """AI Programming Agent: write, run and repair a program for GOAL."""
    from aipa.controller import RetryController
    from aipa.models.config import AipaConfig
    from aipa.models.task import Task
    from aipa.providers.templates import TemplateSourceProvider
    from aipa.toolchain.languages import build_registry
    from aipa.workspace import Workspace

    load_dotenv()
    _configure_logging(debug)
    console = get_console()

    try:
        config = AipaConfig.build(
            workspace_root=workspace,
            max_attempts=max_attempts,
            subprocess_timeout=timeout,
            fail_fast_unsupported=fail_fast_unsupported,
            executables=executables,
        )
        registry = build_registry(config)
        ws = Workspace(config.resolved_workspace_root(), registry)
        root = ws.ensure_workspace()
        logger.debug("Project dir: %s", root)

        with _fixer_session(fixer, model, console) as source_fixer:
            controller = RetryController(
                ws,
                TemplateSourceProvider(),
                registry,
                source_fixer,
                config=config,
                on_attempt=lambda record: format_attempt(record, config.max_attempts, console),
            )
            result = controller.process_task(Task(language=language, goal=goal))
    except AipaError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    format_result(result, console)


def main() -> None:
    """Console-script entry point."""
    cli()
