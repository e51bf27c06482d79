"""Scheduler infrastructure."""

from .aps_scheduler import APSchedulerScheduler

__all__ = ["APSchedulerScheduler"]
