"""Scanner for Docker Compose files.

Any of ``docker-compose.yml``, ``docker-compose.yaml``, ``compose.yaml`` or
``compose.yml`` enables the scanner. Five project-wide operations are always
emitted, followed by ``up``/``logs``/``restart`` for every declared service.
A service's ``description`` label (or ``com.docker.compose.description``)
is folded into its ``up`` description.
"""

from __future__ import annotations

from pathlib import Path

from taskscout.exceptions import ScanError
from taskscout.scanners.base import Command, Scanner, expect_mapping, find_first, load_yaml

COMPOSE_FILENAMES: tuple[str, ...] = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "compose.yaml",
    "compose.yml",
)

_PROJECT_OPS: tuple[tuple[str, str, str], ...] = (
    ("docker compose up -d", "Start all services in detached mode", "up"),
    ("docker compose down", "Stop and remove all services", "down"),
    ("docker compose build", "Build all services", "build"),
    ("docker compose ps", "List running containers", "ps"),
    ("docker compose logs -f", "Follow logs for all services", "logs"),
)


def _service_label(service: object, *keys: str) -> str:
    """Look up the first present label among ``keys`` on a service config."""
    if not isinstance(service, dict):
        return ""
    labels = service.get("labels")
    if isinstance(labels, list):
        # "key=value" list form.
        labels = dict(str(item).partition("=")[::2] for item in labels)
    if not isinstance(labels, dict):
        return ""
    for key in keys:
        value = labels.get(key)
        if value:
            return str(value)
    return ""


class DockerComposeScanner(Scanner):
    """Scanner for docker compose services."""

    name = "docker"
    file_patterns = COMPOSE_FILENAMES

    def scan(self, directory: Path) -> list[Command]:
        compose_file = find_first(directory, COMPOSE_FILENAMES)
        if compose_file is None:
            return []
        data = expect_mapping(load_yaml(compose_file, self.name), compose_file, self.name)

        services = data.get("services") or {}
        if not isinstance(services, dict):
            raise ScanError(self.name, "'services' must be a mapping", compose_file)

        commands = [
            self._command(cmd, description, ("docker", "compose", verb), directory)
            for cmd, description, verb in _PROJECT_OPS
        ]
        for service_name, service in services.items():
            service_name = str(service_name)
            label = _service_label(service, "description", "com.docker.compose.description")
            up_description = (
                f"Start {service_name}: {label}" if label else f"Start {service_name} service"
            )
            commands.append(self._command(
                f"docker compose up {service_name}", up_description,
                ("docker", "compose", "up", service_name), directory,
            ))
            commands.append(self._command(
                f"docker compose logs {service_name}", f"View logs for {service_name}",
                ("docker", "compose", "logs", service_name), directory,
            ))
            commands.append(self._command(
                f"docker compose restart {service_name}", f"Restart {service_name} service",
                ("docker", "compose", "restart", service_name), directory,
            ))
        return commands

    def _command(
        self, command: str, description: str, tags: tuple[str, ...], directory: Path,
    ) -> Command:
        return Command(
            name=command,
            command=command,
            source=self.name,
            description=description,
            working_dir=directory,
            tags=tags,
        )
