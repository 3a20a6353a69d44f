"""
Rewatch Control Package.

The loop that ties file events to the process supervisor.
Requires Python 3.11+.
"""

from control.loop import ControlLoop

__all__ = ["ControlLoop"]
