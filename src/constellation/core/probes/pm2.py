"""
Process-manager probe backed by `pm2 jlist`.
"""

import json
import logging
from typing import Any, Protocol

from constellation.core.probes.models import ProcessInfo
from constellation.core.probes.runner import run_command

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class ProcessManager(Protocol):
    """Anything that can list supervised processes."""

    def list_processes(self) -> list[ProcessInfo]: ...


def _to_process(raw: dict[str, Any]) -> ProcessInfo | None:
    name = raw.get("name")
    if not isinstance(name, str) or not name:
        return None
    env = raw.get("pm2_env") if isinstance(raw.get("pm2_env"), dict) else {}
    monit = raw.get("monit") if isinstance(raw.get("monit"), dict) else {}
    try:
        return ProcessInfo(
            name=name,
            status=str(env.get("status", "unknown")),
            cpu=float(monit.get("cpu") or 0),
            memory=round(float(monit.get("memory") or 0) / BYTES_PER_MB),
            uptime=int(env.get("pm_uptime") or 0),
            restarts=int(env.get("restart_time") or 0),
            pid=raw.get("pid") if isinstance(raw.get("pid"), int) else None,
        )
    except (TypeError, ValueError):
        return None


def parse_jlist(output: str) -> list[ProcessInfo]:
    """Parse `pm2 jlist` output; anything unexpected yields []."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError:
        logger.warning("pm2 jlist returned invalid JSON")
        return []
    if not isinstance(data, list):
        return []
    processes = (_to_process(item) for item in data if isinstance(item, dict))
    return [process for process in processes if process is not None]


class Pm2Probe:
    """
    Lists pm2-managed processes.

    Example:
        >>> probe = Pm2Probe(timeout=5)
        >>> [p.name for p in probe.list_processes()]
        ['agent-engineering', 'agent-content']
    """

    def __init__(self, timeout: float = 5.0, binary: str = "pm2") -> None:
        self.timeout = timeout
        self.binary = binary

    def list_processes(self) -> list[ProcessInfo]:
        output = run_command([self.binary, "jlist"], self.timeout)
        if output is None:
            return []
        return parse_jlist(output)


class NullProcessManager:
    """Used when probes are disabled."""

    def list_processes(self) -> list[ProcessInfo]:
        return []
