from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bakery_ops.models import AuditLog
from bakery_ops.services.inventory_act_service import ActCreationReport, OverdueSweepReport

logger = logging.getLogger(__name__)


def log_audit(db: Session, *, action: str, metadata: dict | None = None) -> None:
    db.add(AuditLog(action=action, meta=metadata or {}))


def _commit_audit(db: Session, *, action: str, metadata: dict) -> bool:
    """Audit rows never replace the outcome they describe; failures are logged only."""
    try:
        log_audit(db, action=action, metadata=metadata)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to record audit entry %s', action)
        return False
    return True


def record_scheduler_run(db: Session, *, result) -> bool:
    if not result.ok:
        action = 'WEEKLY_INVENTORY_FAILED'
    else:
        action = f'WEEKLY_INVENTORY_{result.action.value.upper()}'

    metadata: dict = {
        'action': result.action.value if result.action else None,
        'message': result.message,
        'error_kind': result.error_kind,
    }
    report = result.report
    if report is not None:
        metadata['week'] = report.week
        metadata['year'] = report.year
        metadata['notification'] = report.notification.as_dict()
        if isinstance(report, ActCreationReport):
            metadata['created_act_ids'] = report.created_act_ids
            metadata['skipped_store_ids'] = report.skipped_store_ids
        if isinstance(report, OverdueSweepReport):
            metadata['overdue_act_ids'] = report.overdue_act_ids
    return _commit_audit(db, action=action, metadata=metadata)


def record_progress_reminder(db: Session, *, report) -> bool:
    return _commit_audit(
        db,
        action='PROGRESS_REMINDER_SENT',
        metadata={
            'message': report.message,
            'recipients': report.recipients,
            'notification': report.notification.as_dict(),
        },
    )
