"""taskscout: Command discovery and runbook execution for project directories."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
