"""Dedicated builder for exporting simulation snapshots.

Keeps the export format out of the session so it can evolve without
touching the control surface. A snapshot is a timestamped summary:
parameters plus aggregate entity counts, not the full entity state.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import orjson

from mycorrhiza.config.session import EXPORT_FILENAME_PREFIX
from mycorrhiza.exceptions import PersistenceError

if TYPE_CHECKING:
    from mycorrhiza.session import SimulationSession

logger = logging.getLogger(__name__)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_export_filename() -> str:
    return f"{EXPORT_FILENAME_PREFIX}-{int(time.time() * 1000)}.json"


class SimulationStatsExporter:
    """Build and persist snapshots of a simulation session."""

    def __init__(self, session: "SimulationSession") -> None:
        self.session = session

    def build_snapshot(self, moment: Optional[datetime] = None) -> Dict[str, Any]:
        session = self.session
        return {
            "timestamp": iso_timestamp(moment),
            "simulationTime": session.time,
            "parameters": session.parameters.to_dict(),
            "stats": session.stats(),
        }

    def to_json(self, moment: Optional[datetime] = None) -> bytes:
        return orjson.dumps(self.build_snapshot(moment), option=orjson.OPT_INDENT_2)

    def export_to_file(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write a snapshot as JSON.

        Args:
            path: Destination file; defaults to ``amf-simulation-<epoch ms>.json``
                in the working directory

        Returns:
            The path written

        Raises:
            PersistenceError: If the file cannot be written
        """
        destination = Path(path) if path is not None else Path(default_export_filename())
        try:
            destination.write_bytes(self.to_json())
        except OSError as exc:
            raise PersistenceError(f"Could not write snapshot to {destination}: {exc}") from exc

        logger.info("Simulation snapshot exported to: %s", destination)
        return destination


__all__ = ["SimulationStatsExporter", "default_export_filename", "iso_timestamp"]
