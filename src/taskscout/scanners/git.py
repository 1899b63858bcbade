"""Scanner offering everyday git operations at a repository root."""

from __future__ import annotations

from pathlib import Path

from taskscout.scanners.base import Command, Scanner

_GIT_COMMANDS: tuple[tuple[str, str, str], ...] = (
    ("git status", "git status", "Show the working tree status"),
    ("git log", "git log --oneline -20", "Show recent commit history"),
    ("git diff", "git diff", "Show unstaged changes"),
    ("git diff staged", "git diff --staged", "Show staged changes"),
    ("git pull", "git pull", "Fetch and integrate with remote"),
    ("git push", "git push", "Push commits to remote"),
    ("git fetch", "git fetch --all", "Download objects from remote"),
    ("git add all", "git add -A", "Stage all changes"),
    ("git stash", "git stash", "Stash current changes"),
    ("git stash pop", "git stash pop", "Apply and remove latest stash"),
    ("git stash list", "git stash list", "List all stashes"),
    ("git branch list", "git branch -a", "List all branches"),
    ("git branch current", "git branch --show-current", "Show current branch name"),
    ("git commit", "git commit", "Create a commit (opens editor)"),
    ("git commit amend", "git commit --amend", "Amend the last commit"),
    ("git remote", "git remote -v", "Show remote repositories"),
)


class GitScanner(Scanner):
    """Scanner for git working trees.

    Only fires where ``.git`` sits in the visited directory itself (a
    directory for normal clones, a file for worktrees and submodules), so a
    recursive walk does not repeat the same commands for every subdirectory.
    """

    name = "git"
    file_patterns = (".git",)

    def scan(self, directory: Path) -> list[Command]:
        return [
            Command(
                name=name,
                command=command,
                source=self.name,
                description=description,
                working_dir=directory,
                tags=("git", "vcs"),
            )
            for name, command, description in _GIT_COMMANDS
        ]
