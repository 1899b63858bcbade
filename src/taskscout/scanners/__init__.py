"""Project scanners for npm, make, Taskfile, Nx, Turbo, Cargo, Go, Python, Compose and git."""

from taskscout.scanners.base import Command, ScanDiagnostic, Scanner
from taskscout.scanners.cargo import CargoScanner
from taskscout.scanners.docker import DockerComposeScanner
from taskscout.scanners.git import GitScanner
from taskscout.scanners.go_lang import GoScanner
from taskscout.scanners.makefile import MakefileScanner
from taskscout.scanners.npm import NpmScanner
from taskscout.scanners.nx import NxScanner
from taskscout.scanners.python import PythonScanner
from taskscout.scanners.registry import (
    PluginScanner,
    ScannerRegistry,
    default_registry,
    load_plugin_scanners,
)
from taskscout.scanners.taskfile import TaskfileScanner
from taskscout.scanners.turbo import TurboScanner

__all__ = [
    "CargoScanner",
    "Command",
    "DockerComposeScanner",
    "GitScanner",
    "GoScanner",
    "MakefileScanner",
    "NpmScanner",
    "NxScanner",
    "PluginScanner",
    "PythonScanner",
    "ScanDiagnostic",
    "Scanner",
    "ScannerRegistry",
    "TaskfileScanner",
    "TurboScanner",
    "default_registry",
    "load_plugin_scanners",
]
