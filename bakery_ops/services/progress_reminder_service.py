from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bakery_ops.services.collaborators import NotificationDispatcher, NotificationOutcome, ShiftDirectory
from bakery_ops.services.push_service import build_messages

logger = logging.getLogger(__name__)

PROGRESS_TITLE = 'Production progress'
PROGRESS_BODY = 'Report how many kg of products are ready so far'


@dataclass
class ProgressReminderReport:
    message: str = ''
    recipients: int = 0
    notification: NotificationOutcome = field(default_factory=NotificationOutcome)


async def send_progress_reminders(
    *,
    shifts: ShiftDirectory,
    notifier: NotificationDispatcher,
) -> ProgressReminderReport:
    workers = shifts.list_open_shift_workers()
    messages = build_messages(workers, PROGRESS_TITLE, PROGRESS_BODY, {'screen': 'progress'})
    if not messages:
        return ProgressReminderReport(message='No open shifts')

    outcome = await notifier.send_batch(messages)
    if outcome.failed:
        logger.warning('Progress reminder: %d of %d push messages failed', outcome.failed, len(messages))
    return ProgressReminderReport(
        message=f'Sent notifications to {outcome.sent} users',
        recipients=len(messages),
        notification=outcome,
    )
