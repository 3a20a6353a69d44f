"""
Rewatch Supervisor Package.

Child process lifecycle management.
Requires Python 3.11+.
"""

from supervisor.models import Policy, ProcessAction, ProcessResult, ReconcileOutcome
from supervisor.process import ChildProcess, ProcessLauncher, SpawnResult
from supervisor.supervisor import ProcessSupervisor

__all__ = [
    "Policy",
    "ProcessAction",
    "ProcessResult",
    "ReconcileOutcome",
    "ChildProcess",
    "ProcessLauncher",
    "SpawnResult",
    "ProcessSupervisor",
]
