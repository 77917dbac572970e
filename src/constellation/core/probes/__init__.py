"""
External process probes.

The process manager (pm2) and source control (git) are modelled as
injectable capabilities. Every call is bounded by a timeout and degrades
to an empty result, so the aggregator can be exercised without any real
subprocess.
"""

from constellation.core.config.models import ProbeConfig
from constellation.core.probes.git import GitProbe, NullSourceControl, SourceControl
from constellation.core.probes.models import CommitCounts, ProcessInfo
from constellation.core.probes.pm2 import NullProcessManager, Pm2Probe, ProcessManager


def build_probes(config: ProbeConfig) -> tuple[ProcessManager, SourceControl]:
    """Create the probes described by the configuration."""
    if not config.enabled:
        return NullProcessManager(), NullSourceControl()
    return Pm2Probe(timeout=config.pm2_timeout), GitProbe(timeout=config.git_timeout)


__all__ = [
    "CommitCounts",
    "GitProbe",
    "NullProcessManager",
    "NullSourceControl",
    "Pm2Probe",
    "ProcessInfo",
    "ProcessManager",
    "SourceControl",
    "build_probes",
]
