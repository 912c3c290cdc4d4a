"""Template-based source provider.

Each supported language has a fixed program that prints
``AIPA: <goal> completed``. The goal is escaped for the language's string
literal so any goal text yields a program that compiles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from aipa.models.task import Task

UNSUPPORTED_SENTINEL_PREFIX = "# Unsupported language:"


def _escape(text: str, quote: str) -> str:
    escaped = text.replace("\x00", "").replace("\\", "\\\\").replace(quote, "\\" + quote)
    return escaped.replace("\n", "\\n").replace("\r", "\\r")


def _rust(goal: str) -> str:
    # Braces are format placeholders inside println!
    message = _escape(goal, '"').replace("{", "{{").replace("}", "}}")
    return f'fn main() {{ println!("AIPA: {message} completed"); }}'


def _python(goal: str) -> str:
    return f"print('AIPA: {_escape(goal, chr(39))} completed')"


def _cpp(goal: str) -> str:
    return (
        "#include <iostream>\n"
        "int main() {\n"
        f'    std::cout << "AIPA: {_escape(goal, chr(34))} completed" << std::endl;\n'
        "    return 0;\n"
        "}"
    )


def _c(goal: str) -> str:
    # puts, not printf: a goal containing % must not be a format directive
    return (
        "#include <stdio.h>\n"
        "int main(void) {\n"
        f'    puts("AIPA: {_escape(goal, chr(34))} completed");\n'
        "    return 0;\n"
        "}"
    )


def _java(goal: str) -> str:
    return (
        "class Main {\n"
        "    public static void main(String[] args) {\n"
        f'        System.out.println("AIPA: {_escape(goal, chr(34))} completed");\n'
        "    }\n"
        "}"
    )


def _javascript(goal: str) -> str:
    return f"console.log('AIPA: {_escape(goal, chr(39))} completed');"


TEMPLATES: dict[str, Callable[[str], str]] = {
    "rust": _rust,
    "python": _python,
    "cpp": _cpp,
    "c": _c,
    "java": _java,
    "javascript": _javascript,
}


class TemplateSourceProvider:
    """Generates a fixed "goal completed" program per language.

    Pure: the same Task always yields the same text, and nothing is
    written anywhere.
    """

    def __init__(self, templates: dict[str, Callable[[str], str]] | None = None) -> None:
        self._templates = dict(TEMPLATES if templates is None else templates)

    def languages(self) -> list[str]:
        return sorted(self._templates)

    def generate(self, task: Task) -> str:
        template = self._templates.get(task.language)
        if template is None:
            return f"{UNSUPPORTED_SENTINEL_PREFIX} {task.language}"
        return template(task.goal)
