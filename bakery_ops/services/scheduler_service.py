"""Entry point for the weekly inventory scheduler.

One invocation runs exactly one job. The job is either named explicitly by
the caller or inferred from the UTC weekday of ``now``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from bakery_ops.services.collaborators import (
    InventoryActStore,
    NotificationDispatcher,
    StoreDirectory,
    WorkerDirectory,
)
from bakery_ops.services.inventory_act_service import (
    ActCreationReport,
    OverdueSweepReport,
    run_act_creation,
    run_overdue_sweep,
)

logger = logging.getLogger(__name__)


class SchedulerAction(str, Enum):
    CREATE = 'create'
    MARK_OVERDUE = 'mark_overdue'


class ActionInferenceError(ValueError):
    pass


MONDAY = 0
SUNDAY = 6

# Used only when no explicit directive was given. Weekdays missing here are
# an error, not a no-op.
WEEKDAY_ACTIONS: dict[int, SchedulerAction] = {
    SUNDAY: SchedulerAction.CREATE,
    MONDAY: SchedulerAction.MARK_OVERDUE,
}


@dataclass(frozen=True)
class SchedulerJobs:
    stores: StoreDirectory
    workers: WorkerDirectory
    acts: InventoryActStore
    notifier: NotificationDispatcher


@dataclass
class SchedulerResult:
    action: SchedulerAction | None
    message: str
    report: ActCreationReport | OverdueSweepReport | None = None
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_payload(self) -> dict:
        if not self.ok:
            return {'error': self.error}
        payload: dict = {'action': self.action.value, 'message': self.message}
        if self.report is not None:
            payload['notification'] = self.report.notification.as_dict()
        return payload


def parse_directive(payload) -> SchedulerAction | None:
    if payload is None:
        return None
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            payload = json.loads(payload or 'null')
        except ValueError:
            return None
    if not isinstance(payload, Mapping):
        return None
    try:
        return SchedulerAction(payload.get('action'))
    except ValueError:
        return None


def infer_action(directive: SchedulerAction | None, now: datetime) -> SchedulerAction:
    if directive is not None:
        return directive
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    action = WEEKDAY_ACTIONS.get(now.weekday())
    if action is None:
        raise ActionInferenceError('Cannot infer action: not Sunday or Monday. Pass { action } explicitly.')
    return action


async def dispatch(directive: SchedulerAction | None, *, now: datetime, jobs: SchedulerJobs) -> SchedulerResult:
    try:
        action = infer_action(directive, now)
    except ActionInferenceError as exc:
        logger.warning(str(exc))
        return SchedulerResult(action=None, message=str(exc), error=str(exc), error_kind='input')

    logger.info('Running weekly inventory job %s at %s', action.value, now.isoformat())
    try:
        if action == SchedulerAction.CREATE:
            report = await run_act_creation(
                now, stores=jobs.stores, workers=jobs.workers, acts=jobs.acts, notifier=jobs.notifier
            )
        else:
            report = await run_overdue_sweep(now, workers=jobs.workers, acts=jobs.acts, notifier=jobs.notifier)
    except Exception as exc:
        logger.exception('Weekly inventory job %s failed', action.value)
        return SchedulerResult(action=action, message=str(exc), error=str(exc), error_kind='job')

    return SchedulerResult(action=action, message=report.message, report=report)
