from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from bakery_ops.models import (
    SUPERVISORY_ROLES,
    InventoryAct,
    InventoryActItem,
    InventoryActStatus,
    Store,
    Worker,
)
from bakery_ops.services.assignment_service import resolve_responsible_worker
from bakery_ops.services.collaborators import (
    ActCandidate,
    InventoryActStore,
    NotifiableWorker,
    NotificationDispatcher,
    NotificationOutcome,
    StoreDirectory,
    WorkerDirectory,
)
from bakery_ops.services.push_service import build_messages
from bakery_ops.services.week_calendar import iso_week_of, previous_iso_week, sunday_of

logger = logging.getLogger(__name__)

ACT_CREATED_TITLE = 'Inventory count'
ACT_OVERDUE_TITLE = 'Overdue inventory acts'


@dataclass
class ActCreationReport:
    week: int
    year: int
    scheduled_date: date
    message: str = ''
    created_act_ids: list[int] = field(default_factory=list)
    assigned_worker_ids: list[int] = field(default_factory=list)
    skipped_store_ids: list[int] = field(default_factory=list)
    already_scheduled_count: int = 0
    notification: NotificationOutcome = field(default_factory=NotificationOutcome)

    @property
    def created_count(self) -> int:
        return len(self.created_act_ids)


@dataclass
class OverdueSweepReport:
    week: int
    year: int
    message: str = ''
    overdue_act_ids: list[int] = field(default_factory=list)
    overdue_store_ids: list[int] = field(default_factory=list)
    notification: NotificationOutcome = field(default_factory=NotificationOutcome)

    @property
    def overdue_count(self) -> int:
        return len(self.overdue_act_ids)


async def _notify(
    notifier: NotificationDispatcher,
    load_recipients,
    *,
    title: str,
    body: str,
    data: dict,
) -> NotificationOutcome:
    """Best-effort delivery. Failures are logged and returned, never raised."""
    try:
        recipients: list[NotifiableWorker] = load_recipients()
        messages = build_messages(recipients, title, body, data)
        if not messages:
            return NotificationOutcome()
        outcome = await notifier.send_batch(messages)
    except Exception as exc:
        logger.exception('Notification dispatch failed: %s', title)
        return NotificationOutcome(error=str(exc))

    if outcome.failed:
        logger.warning('%s: %d of %d push messages failed', title, outcome.failed, outcome.sent + outcome.failed)
    return outcome


async def run_act_creation(
    now: datetime,
    *,
    stores: StoreDirectory,
    workers: WorkerDirectory,
    acts: InventoryActStore,
    notifier: NotificationDispatcher,
) -> ActCreationReport:
    week, year = iso_week_of(now)
    report = ActCreationReport(week=week, year=year, scheduled_date=sunday_of(week, year))

    store_rows = stores.list_stores()
    if not store_rows:
        report.message = 'No stores found'
        return report

    candidates: list[ActCandidate] = []
    for store in store_rows:
        worker_id = resolve_responsible_worker(workers, store.id)
        if worker_id is None:
            logger.info('Store %s (%s) has no baker assigned; skipping', store.id, store.name)
            report.skipped_store_ids.append(store.id)
            continue
        candidates.append(
            ActCandidate(
                store_id=store.id,
                worker_id=worker_id,
                week_year=year,
                week_number=week,
                scheduled_date=report.scheduled_date,
                status=InventoryActStatus.PENDING,
            )
        )

    if not candidates:
        report.message = f'No bakers assigned to stores - cannot create acts for week {week}/{year}'
        return report

    inserted = acts.upsert_acts(candidates)
    report.created_act_ids = [row.id for row in inserted]
    report.already_scheduled_count = len(candidates) - len(inserted)
    report.assigned_worker_ids = sorted({row.worker_id for row in inserted})
    report.message = f'Created {report.created_count} inventory acts for week {week}/{year}'
    logger.info(
        '%s (skipped %d stores, %d already scheduled)',
        report.message,
        len(report.skipped_store_ids),
        report.already_scheduled_count,
    )

    if report.assigned_worker_ids:
        report.notification = await _notify(
            notifier,
            lambda: workers.list_notifiable_workers(report.assigned_worker_ids),
            title=ACT_CREATED_TITLE,
            body=f'Please count the warehouse stock for week {week}/{year}',
            data={'screen': 'inventory-act'},
        )
    return report


async def run_overdue_sweep(
    now: datetime,
    *,
    workers: WorkerDirectory,
    acts: InventoryActStore,
    notifier: NotificationDispatcher,
) -> OverdueSweepReport:
    current = iso_week_of(now)
    prev_week, prev_year = previous_iso_week(current.week, current.year)
    report = OverdueSweepReport(week=prev_week, year=prev_year)

    updated = acts.update_acts_status(
        week_year=prev_year,
        week_number=prev_week,
        from_status=InventoryActStatus.PENDING,
        to_status=InventoryActStatus.OVERDUE,
    )
    report.overdue_act_ids = [row.id for row in updated]
    report.overdue_store_ids = sorted({row.store_id for row in updated})
    report.message = f'Marked {report.overdue_count} acts as overdue for week {prev_week}/{prev_year}'
    logger.info(report.message)

    if report.overdue_count:
        report.notification = await _notify(
            notifier,
            lambda: workers.list_workers_by_roles(SUPERVISORY_ROLES),
            title=ACT_OVERDUE_TITLE,
            body=f'{report.overdue_count} store(s) did not submit the inventory count for week {prev_week}/{prev_year}',
            data={'screen': 'inventory'},
        )
    return report


def list_acts_for_dashboard(
    db: Session,
    *,
    store_id: int | None = None,
    week_year: int | None = None,
    week_number: int | None = None,
    status: InventoryActStatus | None = None,
    limit: int = 100,
) -> list[dict]:
    conditions = []
    if store_id is not None:
        conditions.append(InventoryAct.store_id == store_id)
    if week_year is not None:
        conditions.append(InventoryAct.week_year == week_year)
    if week_number is not None:
        conditions.append(InventoryAct.week_number == week_number)
    if status is not None:
        conditions.append(InventoryAct.status == status)

    query = (
        select(InventoryAct, Store.name.label('store_name'), Worker.full_name.label('worker_name'))
        .join(Store, Store.id == InventoryAct.store_id)
        .join(Worker, Worker.id == InventoryAct.worker_id)
        .order_by(InventoryAct.created_at.desc(), InventoryAct.id.desc())
        .limit(limit)
    )
    if conditions:
        query = query.where(*conditions)
    rows = db.execute(query).all()

    items_by_act: dict[int, list[dict]] = {}
    act_ids = [row.InventoryAct.id for row in rows]
    if act_ids:
        items = db.execute(
            select(InventoryActItem)
            .where(InventoryActItem.act_id.in_(act_ids))
            .order_by(InventoryActItem.id.asc())
        ).scalars().all()
        for item in items:
            items_by_act.setdefault(item.act_id, []).append(
                {
                    'id': item.id,
                    'resource_type': item.resource_type.value,
                    'item_name': item.item_name,
                    'quantity_kg': item.quantity_kg,
                }
            )

    return [
        {
            'id': row.InventoryAct.id,
            'store_id': row.InventoryAct.store_id,
            'store_name': row.store_name,
            'worker_id': row.InventoryAct.worker_id,
            'worker_name': row.worker_name,
            'week_year': row.InventoryAct.week_year,
            'week_number': row.InventoryAct.week_number,
            'scheduled_date': row.InventoryAct.scheduled_date,
            'conducted_at': row.InventoryAct.conducted_at,
            'status': row.InventoryAct.status.value,
            'created_at': row.InventoryAct.created_at,
            'items': items_by_act.get(row.InventoryAct.id, []),
        }
        for row in rows
    ]
