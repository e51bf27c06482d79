"""Periodic scheduling interface, decoupled from business logic."""

from abc import ABC, abstractmethod
from datetime import time, timedelta
from typing import Any, Awaitable, Callable

Job = Callable[[], Awaitable[Any]]


class Scheduler(ABC):
    """
    Abstract periodic scheduler.

    Jobs registered here are the same coroutines that manual triggers call,
    so a scheduled run and an on-demand run behave identically.
    """

    @abstractmethod
    def run_at(self, at: time, job: Job, job_id: str) -> None:
        """
        Run ``job`` once a day at the given local time.

        Args:
            at: Wall-clock time in the scheduler's timezone
            job: Coroutine function to invoke
            job_id: Stable identifier; re-registering replaces the job
        """
        ...

    @abstractmethod
    def run_every(self, interval: timedelta, job: Job, job_id: str) -> None:
        """Run ``job`` repeatedly with a fixed interval between starts."""
        ...

    @abstractmethod
    def start(self) -> None:
        """Start dispatching registered jobs."""
        ...

    @abstractmethod
    def shutdown(self) -> None:
        """Stop dispatching jobs."""
        ...
