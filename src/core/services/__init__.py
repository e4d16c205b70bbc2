"""Core services.

Why:
- Operations that callers (CLI, drivers, tests) use, expressed against the
  core interfaces only.
"""

from core.services.idling_resources import RemoteCommandInvoker

__all__ = ["RemoteCommandInvoker"]
