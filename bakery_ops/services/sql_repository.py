from __future__ import annotations

import logging

from sqlalchemy import Select, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bakery_ops.models import (
    CompanyRole,
    InventoryAct,
    InventoryActStatus,
    Shift,
    ShiftStatus,
    Store,
    Worker,
    WorkerStoreAssignment,
)
from bakery_ops.services.collaborators import ActCandidate, ActRow, NotifiableWorker, StoreRef, WorkerRef

logger = logging.getLogger(__name__)

ACT_CONFLICT_KEY = ('store_id', 'week_year', 'week_number')


def _read_all(db: Session, query: Select, *, what: str) -> list:
    try:
        return db.execute(query).all()
    except SQLAlchemyError as exc:
        db.rollback()
        raise RuntimeError(f'Failed to fetch {what}: {exc}') from exc


class SqlStoreDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_stores(self) -> list[StoreRef]:
        rows = _read_all(self.db, select(Store.id, Store.name).order_by(Store.id.asc()), what='stores')
        return [StoreRef(id=row.id, name=row.name) for row in rows]


class SqlWorkerDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_workers_by_store_and_role(self, store_id: int, role: CompanyRole) -> list[WorkerRef]:
        query = (
            select(Worker.id)
            .join(WorkerStoreAssignment, WorkerStoreAssignment.worker_id == Worker.id)
            .where(
                WorkerStoreAssignment.store_id == store_id,
                Worker.company_role == role,
                Worker.is_active.is_(True),
            )
            .order_by(WorkerStoreAssignment.created_at.asc(), WorkerStoreAssignment.id.asc())
        )
        rows = _read_all(self.db, query, what=f'workers for store {store_id}')
        return [WorkerRef(id=row.id) for row in rows]

    def list_workers_by_roles(self, roles: tuple[CompanyRole, ...]) -> list[NotifiableWorker]:
        query = (
            select(Worker.id, Worker.push_token)
            .where(
                Worker.company_role.in_(roles),
                Worker.push_token.is_not(None),
                Worker.is_active.is_(True),
            )
            .order_by(Worker.id.asc())
        )
        rows = _read_all(self.db, query, what='supervisory workers')
        return [NotifiableWorker(id=row.id, push_token=row.push_token) for row in rows]

    def list_notifiable_workers(self, worker_ids: list[int]) -> list[NotifiableWorker]:
        if not worker_ids:
            return []
        query = (
            select(Worker.id, Worker.push_token)
            .where(Worker.id.in_(worker_ids), Worker.push_token.is_not(None))
            .order_by(Worker.id.asc())
        )
        rows = _read_all(self.db, query, what='worker push tokens')
        return [NotifiableWorker(id=row.id, push_token=row.push_token) for row in rows]


class SqlShiftDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_open_shift_workers(self) -> list[NotifiableWorker]:
        query = (
            select(Worker.id, Worker.push_token)
            .join(Shift, Shift.worker_id == Worker.id)
            .where(Shift.status == ShiftStatus.OPEN, Worker.push_token.is_not(None))
            .distinct()
            .order_by(Worker.id.asc())
        )
        rows = _read_all(self.db, query, what='open shifts')
        return [NotifiableWorker(id=row.id, push_token=row.push_token) for row in rows]


class SqlInventoryActStore:
    """Inventory-act writes. Each call is a single statement committed on success."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == 'postgresql':
            return postgresql.insert(InventoryAct)
        if dialect == 'sqlite':
            return sqlite.insert(InventoryAct)
        raise RuntimeError(f'Unsupported database dialect for act upsert: {dialect}')

    def upsert_acts(self, candidates: list[ActCandidate]) -> list[ActRow]:
        if not candidates:
            return []

        stmt = (
            self._insert()
            .values(
                [
                    {
                        'store_id': candidate.store_id,
                        'worker_id': candidate.worker_id,
                        'week_year': candidate.week_year,
                        'week_number': candidate.week_number,
                        'scheduled_date': candidate.scheduled_date,
                        'status': candidate.status,
                    }
                    for candidate in candidates
                ]
            )
            .on_conflict_do_nothing(index_elements=list(ACT_CONFLICT_KEY))
            .returning(InventoryAct.id, InventoryAct.store_id, InventoryAct.worker_id)
        )
        try:
            rows = self.db.execute(stmt).all()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RuntimeError(f'Failed to insert acts: {exc}') from exc

        logger.debug('Act upsert inserted %d of %d candidates', len(rows), len(candidates))
        return [ActRow(id=row.id, store_id=row.store_id, worker_id=row.worker_id) for row in rows]

    def update_acts_status(
        self,
        *,
        week_year: int,
        week_number: int,
        from_status: InventoryActStatus,
        to_status: InventoryActStatus,
    ) -> list[ActRow]:
        stmt = (
            update(InventoryAct)
            .where(
                InventoryAct.week_year == week_year,
                InventoryAct.week_number == week_number,
                InventoryAct.status == from_status,
            )
            .values(status=to_status)
            .returning(InventoryAct.id, InventoryAct.store_id, InventoryAct.worker_id)
            .execution_options(synchronize_session=False)
        )
        try:
            rows = self.db.execute(stmt).all()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RuntimeError(f'Failed to mark {to_status.value}: {exc}') from exc

        return [ActRow(id=row.id, store_id=row.store_id, worker_id=row.worker_id) for row in rows]
