"""
Report Scheduler - fires period reports on fixed calendar triggers.

- daily:   every day at the report hour
- weekly:  on the configured weekday at the report hour
- monthly: at the report hour on the last day of the month (tomorrow is the 1st)

Times are wall-clock in the report timezone. The scheduler is owned by the
host process: start() on application startup, stop() on shutdown. Outside
production it stays inert. A failed send is logged and never retried; the
next firing is the retry.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from consultant_tracker.core.config import Settings, get_settings
from consultant_tracker.core.logging_config import scheduler_logger as logger
from consultant_tracker.services.report_service import ReportService, local_clock

POLL_SECONDS = 30


@dataclass(frozen=True)
class ReportJob:
    period: str
    hour: int = 19
    minute: int = 0
    weekday: Optional[int] = None  # Monday=0
    last_day_of_month: bool = False

    def matches(self, moment: datetime) -> bool:
        if moment.hour != self.hour or moment.minute != self.minute:
            return False
        if self.weekday is not None and moment.weekday() != self.weekday:
            return False
        if self.last_day_of_month and (moment + timedelta(days=1)).day != 1:
            return False
        return True


def default_jobs(hour: int = 19, weekly_weekday: int = 4) -> List[ReportJob]:
    return [
        ReportJob("daily", hour=hour),
        ReportJob("weekly", hour=hour, weekday=weekly_weekday),
        ReportJob("monthly", hour=hour, last_day_of_month=True),
    ]


class ReportScheduler:
    def __init__(
        self,
        report_service: ReportService,
        sender: Optional[str],
        recipients: List[str],
        clock: Callable[[], datetime],
        enabled: bool = False,
        jobs: Optional[List[ReportJob]] = None,
        poll_seconds: float = POLL_SECONDS,
    ):
        self.report_service = report_service
        self.sender = sender
        self.recipients = list(recipients or [])
        self.clock = clock
        self.enabled = enabled
        self.jobs = jobs if jobs is not None else default_jobs()
        self.poll_seconds = poll_seconds
        self._task: Optional[asyncio.Task] = None
        self._last_fired: Dict[str, datetime] = {}

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start the timer loop on the running event loop. No-op outside production."""
        if not self.enabled:
            logger.info("[Scheduler] Scheduler disabled in non-production environment")
            return False
        if self.running:
            return True
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"[Scheduler] Report schedulers started: {', '.join(job.period for job in self.jobs)}")
        return True

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[Scheduler] Report schedulers stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.tick(self.clock())
            except Exception as e:
                logger.error(f"[Scheduler] Tick failed: {e}")
            await asyncio.sleep(self.poll_seconds)

    async def tick(self, moment: datetime) -> List[str]:
        """Run every job due at this minute, once per minute. Returns the periods fired."""
        minute = moment.replace(second=0, microsecond=0)
        fired = []
        for job in self.jobs:
            if not job.matches(minute) or self._last_fired.get(job.period) == minute:
                continue
            self._last_fired[job.period] = minute
            logger.info(f"[Scheduler] Running {job.period} email report...")
            await self.send_scheduled_report(job.period)
            fired.append(job.period)
        return fired

    async def send_scheduled_report(self, period: str) -> bool:
        """Generate and deliver one report. Never raises."""
        if not self.sender:
            logger.error("[Scheduler] REPORT_SENDER_EMAIL not configured")
            return False
        if not self.recipients:
            logger.error("[Scheduler] REPORT_RECIPIENT_EMAILS not configured")
            return False

        try:
            sent = await asyncio.to_thread(self.report_service.send, period, self.sender, self.recipients)
        except Exception as e:
            logger.error(f"[Scheduler] Error sending scheduled {period} report: {e}")
            return False

        if sent:
            logger.info(f"[Scheduler] {period} report sent successfully to {', '.join(self.recipients)}")
        else:
            logger.error(f"[Scheduler] Failed to send {period} report")
        return sent

    async def trigger_report(self, period: str) -> bool:
        """Manual send, bypassing the calendar."""
        logger.info(f"[Scheduler] Manually triggering {period} report...")
        return await self.send_scheduled_report(period)


def build_report_scheduler(settings: Optional[Settings] = None) -> ReportScheduler:
    """Scheduler wired from configuration: SMTP channel, report timezone, production flag."""
    settings = settings or get_settings()
    clock = local_clock(settings.report_timezone)
    return ReportScheduler(
        report_service=ReportService(clock=clock, timezone_name=settings.report_timezone),
        sender=settings.report_sender_email,
        recipients=settings.report_recipients,
        clock=clock,
        enabled=settings.is_production,
        jobs=default_jobs(settings.report_hour, settings.weekly_report_weekday),
    )
