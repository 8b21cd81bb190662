from aayutrace.tasks.scheduler import (
    start_scheduler,
    stop_scheduler,
    get_scheduler_status,
)
from aayutrace.tasks.reminder_dispatcher import (
    dispatch_due_reminders,
    send_daily_digests,
)

__all__ = [
    "start_scheduler",
    "stop_scheduler",
    "get_scheduler_status",
    "dispatch_due_reminders",
    "send_daily_digests",
]
