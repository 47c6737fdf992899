"""Probing subsystem — status tracking, per-target monitors, registry."""

from .checks import CheckError, HealthPayload, http_check
from .monitor import CheckFn, TargetMonitor
from .registry import ProbeError, ProbeRegistry, TargetExistsError, TargetNotFoundError
from .status import StatusSnapshot, StatusTracker
