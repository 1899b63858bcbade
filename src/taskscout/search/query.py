"""Query parsing: filter tokens versus fuzzy pattern.

A search query may mix a fuzzy pattern with filter tokens:

- ``#tag`` keeps commands carrying that tag (exact, case-insensitive).
- ``source:name`` keeps commands whose source contains ``name``.
- ``@workspace`` keeps commands whose workspace contains ``workspace``.

Tokens of one kind are OR-ed together; different kinds are AND-ed. A bare
``#``, ``@`` or ``source:`` with nothing after it is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from taskscout.scanners.base import Command

SOURCE_PREFIX = "source:"


@dataclass(frozen=True)
class ParsedQuery:
    """A search query split into its fuzzy pattern and filters."""

    pattern: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)
    sources: tuple[str, ...] = field(default_factory=tuple)
    workspaces: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_filters(self) -> bool:
        return bool(self.tags or self.sources or self.workspaces)

    def matches(self, command: Command) -> bool:
        """Return True if ``command`` passes every filter in the query."""
        if self.tags:
            command_tags = {tag.lower() for tag in command.tags}
            if not any(tag in command_tags for tag in self.tags):
                return False
        if self.sources:
            source = command.source.lower()
            if not any(wanted in source for wanted in self.sources):
                return False
        if self.workspaces:
            if command.workspace is None:
                return False
            workspace = command.workspace.lower()
            if not any(wanted in workspace for wanted in self.workspaces):
                return False
        return True

    def describe_filters(self) -> str | None:
        """Render the active filters back into query syntax, or None."""
        if not self.has_filters:
            return None
        parts = [f"#{tag}" for tag in self.tags]
        parts.extend(f"{SOURCE_PREFIX}{source}" for source in self.sources)
        parts.extend(f"@{workspace}" for workspace in self.workspaces)
        return " ".join(parts)


def parse_query(text: str) -> ParsedQuery:
    """Split raw query text into a ``ParsedQuery``."""
    tags: list[str] = []
    sources: list[str] = []
    workspaces: list[str] = []
    pattern: list[str] = []

    for token in text.split():
        if token.startswith("#"):
            if token[1:]:
                tags.append(token[1:].lower())
        elif token.startswith(SOURCE_PREFIX):
            if token[len(SOURCE_PREFIX):]:
                sources.append(token[len(SOURCE_PREFIX):].lower())
        elif token.startswith("@"):
            if token[1:]:
                workspaces.append(token[1:].lower())
        else:
            pattern.append(token)

    return ParsedQuery(
        pattern=" ".join(pattern),
        tags=tuple(tags),
        sources=tuple(sources),
        workspaces=tuple(workspaces),
    )
