"""Simulation output logging: persists the session log, trade log, and summary.

The output directory structure is::

    {output_dir}/{run_name}/
    ├── config.yaml
    ├── session_log.json
    ├── trades.json
    └── summary.json
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from models.config import SimulationConfig
from models.log import RejectedOrderLog, SessionLog
from models.portfolio import PortfolioSnapshot
from models.trade import TradeRecord

logger = logging.getLogger(__name__)


def run_name_from_config_path(config_path: str | Path) -> str:
    """Derive a run name from the configuration file path (stem without extension)."""
    return Path(config_path).stem


class SimulationLogger:
    """Manages on-disk output for a simulation run.

    Call ``init_run`` once at the start, ``record_trade`` / ``record_rejection``
    as orders settle, and ``finalize`` at the very end.
    """

    def __init__(
        self,
        output_dir: str,
        config: SimulationConfig,
        run_name: str,
    ) -> None:
        self._run_dir = _unique_run_dir(Path(output_dir), run_name)
        self._session_log = SessionLog(
            run_name=self._run_dir.name,
            config=config,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_run(self, config_yaml_path: str | None = None) -> None:
        """Create the output directory and optionally copy the config."""
        self._run_dir.mkdir(parents=True, exist_ok=True)
        if config_yaml_path is not None:
            dest = self._run_dir / "config.yaml"
            shutil.copy2(config_yaml_path, dest)
            logger.info("Copied config to %s", dest)

    def record_trade(self, trade: TradeRecord) -> None:
        self._session_log.trades.append(trade)

    def record_rejection(self, rejection: RejectedOrderLog) -> None:
        self._session_log.rejected_orders.append(rejection)

    def record_error(self, message: str) -> None:
        """Append an error message to the run-level log."""
        self._session_log.errors.append(message)
        logger.error("Simulation error: %s", message)

    def finalize(
        self,
        final_snapshot: PortfolioSnapshot,
        ticks_applied: int,
        summary: dict[str, Any] | None = None,
    ) -> None:
        """Write the session log, the trade log, and an optional summary."""
        self._session_log.final_snapshot = final_snapshot
        self._session_log.ticks_applied = ticks_applied

        _write_json(
            self._run_dir / "session_log.json",
            self._session_log.model_dump(mode="json"),
        )
        _write_json(
            self._run_dir / "trades.json",
            [t.model_dump(mode="json") for t in self._session_log.trades],
        )
        if summary is not None:
            _write_json(self._run_dir / "summary.json", summary)
        logger.info("Session log finalized at %s", self._run_dir)

    @property
    def session_log(self) -> SessionLog:
        """Expose the in-memory session log (used by the runner for summaries)."""
        return self._session_log

    @property
    def run_dir(self) -> Path:
        return self._run_dir


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _unique_run_dir(output_dir: Path, run_name: str) -> Path:
    """Return a run directory that does not already exist.

    If ``output_dir/run_name`` is free, use it directly (first run keeps
    a clean name).  Otherwise append an incrementing suffix:
    ``run_name_001``, ``run_name_002``, etc.
    """
    candidate = output_dir / run_name
    if not candidate.exists():
        return candidate

    idx = 1
    while True:
        candidate = output_dir / f"{run_name}_{idx:03d}"
        if not candidate.exists():
            return candidate
        idx += 1


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as pretty-printed JSON to *path*."""
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
