"""
Background Jobs Module

Handles scheduled tasks for:
- Debounced draft autosave of inspection sessions
"""

from app.jobs.scheduler import scheduler, start_scheduler, shutdown_scheduler
from app.jobs.autosave import AutosaveScheduler

__all__ = [
    "scheduler",
    "start_scheduler",
    "shutdown_scheduler",
    "AutosaveScheduler",
]
