from __future__ import annotations

from bakery_ops.models import CompanyRole, InventoryActStatus
from bakery_ops.services.collaborators import (
    ActCandidate,
    ActRow,
    NotifiableWorker,
    NotificationOutcome,
    PushMessage,
    StoreRef,
    WorkerRef,
)


class InMemoryStoreDirectory:
    def __init__(self, stores: list[StoreRef], *, error: Exception | None = None) -> None:
        self.stores = stores
        self.error = error
        self.calls = 0

    def list_stores(self) -> list[StoreRef]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.stores)


class InMemoryWorkerDirectory:
    """Workers as (id, role, push_token, store_ids) in assignment order."""

    def __init__(self, workers: list[tuple[int, CompanyRole, str | None, list[int]]]) -> None:
        self.workers = workers
        self.calls = 0

    def list_workers_by_store_and_role(self, store_id: int, role: CompanyRole) -> list[WorkerRef]:
        self.calls += 1
        return [WorkerRef(id=w_id) for w_id, w_role, _, store_ids in self.workers if w_role == role and store_id in store_ids]

    def list_workers_by_roles(self, roles: tuple[CompanyRole, ...]) -> list[NotifiableWorker]:
        self.calls += 1
        return [
            NotifiableWorker(id=w_id, push_token=token)
            for w_id, w_role, token, _ in self.workers
            if w_role in roles and token
        ]

    def list_notifiable_workers(self, worker_ids: list[int]) -> list[NotifiableWorker]:
        self.calls += 1
        return [NotifiableWorker(id=w_id, push_token=token) for w_id, _, token, _ in self.workers if w_id in worker_ids and token]


class InMemoryActStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[int, int, int], dict] = {}
        self.upsert_error: Exception | None = None
        self.update_error: Exception | None = None
        self._next_id = 1

    def add(self, *, store_id: int, worker_id: int, week_year: int, week_number: int, status: InventoryActStatus) -> int:
        act_id = self._next_id
        self._next_id += 1
        self.rows[(store_id, week_year, week_number)] = {
            'id': act_id,
            'store_id': store_id,
            'worker_id': worker_id,
            'week_year': week_year,
            'week_number': week_number,
            'scheduled_date': None,
            'status': status,
        }
        return act_id

    def upsert_acts(self, candidates: list[ActCandidate]) -> list[ActRow]:
        if self.upsert_error:
            raise self.upsert_error
        inserted: list[ActRow] = []
        for candidate in candidates:
            key = (candidate.store_id, candidate.week_year, candidate.week_number)
            if key in self.rows:
                continue
            act_id = self.add(
                store_id=candidate.store_id,
                worker_id=candidate.worker_id,
                week_year=candidate.week_year,
                week_number=candidate.week_number,
                status=candidate.status,
            )
            self.rows[key]['scheduled_date'] = candidate.scheduled_date
            inserted.append(ActRow(id=act_id, store_id=candidate.store_id, worker_id=candidate.worker_id))
        return inserted

    def update_acts_status(self, *, week_year, week_number, from_status, to_status) -> list[ActRow]:
        if self.update_error:
            raise self.update_error
        updated: list[ActRow] = []
        for row in self.rows.values():
            if row['week_year'] == week_year and row['week_number'] == week_number and row['status'] == from_status:
                row['status'] = to_status
                updated.append(ActRow(id=row['id'], store_id=row['store_id'], worker_id=row['worker_id']))
        return updated


class RecordingDispatcher:
    def __init__(self, *, fail: bool = False, error: Exception | None = None) -> None:
        self.fail = fail
        self.error = error
        self.batches: list[list[PushMessage]] = []

    async def send_batch(self, messages: list[PushMessage]) -> NotificationOutcome:
        if self.error:
            raise self.error
        self.batches.append(list(messages))
        if self.fail:
            return NotificationOutcome(sent=0, failed=len(messages))
        return NotificationOutcome(sent=len(messages), failed=0)


class InMemoryShiftDirectory:
    def __init__(self, workers: list[NotifiableWorker]) -> None:
        self.workers = workers

    def list_open_shift_workers(self) -> list[NotifiableWorker]:
        return list(self.workers)
