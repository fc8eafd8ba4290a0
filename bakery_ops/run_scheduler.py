from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime, timezone

from bakery_ops.db import SessionLocal
from bakery_ops.dependencies import build_scheduler_jobs
from bakery_ops.logging_config import configure_logging
from bakery_ops.services.audit_service import record_progress_reminder, record_scheduler_run
from bakery_ops.services.progress_reminder_service import send_progress_reminders
from bakery_ops.services.provider_factory import get_push_dispatcher
from bakery_ops.services.scheduler_service import SchedulerAction, dispatch
from bakery_ops.services.sql_repository import SqlShiftDirectory

PROGRESS_REMINDER = 'progress_reminder'


def _parse_now(raw: str | None) -> datetime:
    if not raw:
        return datetime.now(tz=timezone.utc)
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


async def run(action: str | None, now: datetime) -> int:
    with SessionLocal() as db:
        if action == PROGRESS_REMINDER:
            try:
                report = await send_progress_reminders(shifts=SqlShiftDirectory(db), notifier=get_push_dispatcher())
            except RuntimeError as exc:
                print(f'Error: {exc}', file=sys.stderr)
                return 1
            record_progress_reminder(db, report=report)
            print(report.message)
            return 0

        directive = SchedulerAction(action) if action else None
        result = await dispatch(directive, now=now, jobs=build_scheduler_jobs(db))
        record_scheduler_run(db, result=result)

    if not result.ok:
        print(f'Error: {result.error}', file=sys.stderr)
        return 2 if result.error_kind == 'input' else 1
    print(result.message)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description='Run the weekly inventory scheduler once.')
    parser.add_argument(
        '--action',
        choices=[SchedulerAction.CREATE.value, SchedulerAction.MARK_OVERDUE.value, PROGRESS_REMINDER],
        help='Job to run. Without it the job is inferred from the weekday (Sunday: create, Monday: mark_overdue).',
    )
    parser.add_argument('--now', help='Override the current time (ISO-8601, UTC if no offset is given).')
    args = parser.parse_args()

    configure_logging()
    raise SystemExit(asyncio.run(run(args.action, _parse_now(args.now))))


if __name__ == '__main__':
    main()
