"""Scanner for Makefile targets.

Targets are read with a line-oriented regex rather than by invoking ``make``,
so scanning never executes project code. The rules:

- A target line starts at column 0 with ``name:`` (but not ``name :=``).
- Names starting with ``.`` (``.PHONY``, ``.DEFAULT``) or ``_`` (private
  helpers by convention) are excluded, as are the special names in
  ``_SPECIAL_TARGETS``.
- Targets listed in ``.PHONY`` are ordered first, then the rest
  alphabetically.
- A ``#`` comment on the line directly above a target becomes its
  description. ``target: ## text`` (the self-documenting Makefile idiom)
  takes precedence.
"""

from __future__ import annotations

import re
from pathlib import Path

from taskscout.scanners.base import Command, Scanner, find_first, read_text

MAKEFILE_NAMES: tuple[str, ...] = ("GNUmakefile", "Makefile", "makefile")

_TARGET_RE = re.compile(
    r"^([A-Za-z0-9_.][A-Za-z0-9_./-]*(?:[ \t]+[A-Za-z0-9_.][A-Za-z0-9_./-]*)*)"
    r"\s*:(?!:?=):?(.*)$"
)
_INLINE_DOC_RE = re.compile(r"##\s*(.+)$")

_SPECIAL_TARGETS = frozenset({"FORCE", "MAKEFLAGS", "SHELL", "MAKEFILE_LIST"})


def is_visible_target(target: str) -> bool:
    """True for targets a user would run directly."""
    if target.startswith((".", "_")):
        return False
    return target not in _SPECIAL_TARGETS


def parse_targets(content: str) -> list[tuple[str, str]]:
    """Parse ``(target, description)`` pairs from Makefile content.

    Args:
        content: Raw Makefile text.

    Returns:
        Visible targets, ``.PHONY`` ones first, each group sorted by name.
    """
    phony: set[str] = set()
    found: dict[str, str] = {}
    previous_comment = ""

    for raw_line in content.splitlines():
        if raw_line.startswith("\t"):
            # Recipe line.
            previous_comment = ""
            continue
        line = raw_line.strip()
        if line.startswith("#"):
            previous_comment = line.lstrip("#").strip()
            continue
        if not line:
            previous_comment = ""
            continue

        if line.startswith(".PHONY"):
            _, _, names = line.partition(":")
            phony.update(names.split())
            previous_comment = ""
            continue

        match = _TARGET_RE.match(raw_line)
        if match:
            rest = match.group(2)
            inline = _INLINE_DOC_RE.search(rest)
            description = inline.group(1).strip() if inline else previous_comment
            for target in match.group(1).split():
                if target not in found:
                    found[target] = description
        previous_comment = ""

    visible = [t for t in found if is_visible_target(t)]
    visible.sort(key=lambda t: (t not in phony, t))
    return [(t, found[t]) for t in visible]


class MakefileScanner(Scanner):
    """Scanner for ``GNUmakefile`` / ``Makefile`` / ``makefile`` targets."""

    name = "make"
    file_patterns = MAKEFILE_NAMES

    def scan(self, directory: Path) -> list[Command]:
        makefile = find_first(directory, MAKEFILE_NAMES)
        if makefile is None:
            return []
        content = read_text(makefile, self.name)

        commands: list[Command] = []
        for target, description in parse_targets(content):
            command = f"make {target}"
            commands.append(Command(
                name=command,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("make",),
            ))
        return commands
