from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bakery_ops.db import get_db
from bakery_ops.dependencies import get_scheduler_jobs, get_shift_directory
from bakery_ops.security.trigger_token import require_trigger_token
from bakery_ops.services.audit_service import record_progress_reminder, record_scheduler_run
from bakery_ops.services.collaborators import ShiftDirectory
from bakery_ops.services.progress_reminder_service import send_progress_reminders
from bakery_ops.services.provider_factory import get_push_dispatcher
from bakery_ops.services.scheduler_service import SchedulerJobs, dispatch, parse_directive

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/scheduler', tags=['scheduler'], dependencies=[Depends(require_trigger_token)])

ERROR_STATUS_CODES = {'input': 400, 'job': 500}


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


@router.post('/weekly-inventory')
async def weekly_inventory(
    request: Request,
    jobs: SchedulerJobs = Depends(get_scheduler_jobs),
    db: Session = Depends(get_db),
):
    directive = parse_directive(await request.body())
    result = await dispatch(directive, now=_now(), jobs=jobs)
    record_scheduler_run(db, result=result)

    status_code = 200 if result.ok else ERROR_STATUS_CODES.get(result.error_kind, 500)
    return JSONResponse(result.to_payload(), status_code=status_code)


@router.post('/progress-reminder')
async def progress_reminder(
    shifts: ShiftDirectory = Depends(get_shift_directory),
    db: Session = Depends(get_db),
):
    try:
        report = await send_progress_reminders(shifts=shifts, notifier=get_push_dispatcher())
    except RuntimeError as exc:
        logger.exception('Progress reminder failed')
        return JSONResponse({'error': str(exc)}, status_code=500)
    record_progress_reminder(db, report=report)
    return {
        'message': report.message,
        'recipients': report.recipients,
        'notification': report.notification.as_dict(),
    }
