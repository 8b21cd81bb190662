"""
Configuration du scheduler pour les tâches périodiques
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from aayutrace.tasks.reminder_dispatcher import (
    dispatch_due_reminders,
    send_daily_digests,
)
from aayutrace.core.config import settings
import logging

logger = logging.getLogger(__name__)
scheduler = BackgroundScheduler()


def start_scheduler():
    """
    Démarre le scheduler avec toutes les tâches configurées

    Tâches planifiées:
    1. Promotion des rappels échus en notifications (toutes les heures)
    2. Résumés quotidiens par email (tous les jours à DAILY_DIGEST_TIME)
    """

    if not settings.SCHEDULER_ENABLED:
        logger.warning("Scheduler is disabled in settings")
        return

    logger.info("Starting scheduler...")

    scheduler.add_job(
        dispatch_due_reminders,
        trigger=IntervalTrigger(hours=settings.REMINDER_CHECK_INTERVAL_HOURS),
        id="dispatch_reminders",
        name="Promote due reminders to notifications",
        replace_existing=True,
        misfire_grace_time=300,
    )
    logger.info(
        f"Scheduled: Reminder dispatch (every {settings.REMINDER_CHECK_INTERVAL_HOURS}h)"
    )

    if settings.SEND_DAILY_DIGEST:
        hour, minute = settings.DAILY_DIGEST_TIME.split(":")

        scheduler.add_job(
            send_daily_digests,
            trigger=CronTrigger(hour=int(hour), minute=int(minute)),
            id="daily_digests",
            name="Send daily digest emails",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled: Daily digests (every day at {settings.DAILY_DIGEST_TIME})"
        )

    scheduler.start()
    logger.info("Scheduler started successfully")

    for job in scheduler.get_jobs():
        logger.info(f"  - {job.name} (ID: {job.id}, Next run: {job.next_run_time})")


def stop_scheduler():
    if not scheduler.running:
        return
    logger.info("Stopping scheduler...")
    scheduler.shutdown(wait=True)
    logger.info("Scheduler stopped")


def get_scheduler_status():
    """Statut du scheduler et de ses tâches (monitoring)"""
    if not scheduler.running:
        return {"running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run": (
                    job.next_run_time.isoformat() if job.next_run_time else None
                ),
                "trigger": str(job.trigger),
            }
        )

    return {"running": True, "jobs": jobs}
