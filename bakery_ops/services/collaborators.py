from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from bakery_ops.models import CompanyRole, InventoryActStatus


@dataclass(frozen=True)
class StoreRef:
    id: int
    name: str


@dataclass(frozen=True)
class WorkerRef:
    id: int


@dataclass(frozen=True)
class NotifiableWorker:
    id: int
    push_token: str


@dataclass(frozen=True)
class ActCandidate:
    store_id: int
    worker_id: int
    week_year: int
    week_number: int
    scheduled_date: date
    status: InventoryActStatus = InventoryActStatus.PENDING


@dataclass(frozen=True)
class ActRow:
    id: int
    store_id: int
    worker_id: int


@dataclass(frozen=True)
class PushMessage:
    to: str
    title: str
    body: str
    data: dict = field(default_factory=dict)
    sound: str = 'default'
    priority: str = 'high'

    def to_payload(self) -> dict:
        return {
            'to': self.to,
            'title': self.title,
            'body': self.body,
            'data': self.data,
            'sound': self.sound,
            'priority': self.priority,
        }


@dataclass(frozen=True)
class NotificationOutcome:
    sent: int = 0
    failed: int = 0
    error: str | None = None

    def as_dict(self) -> dict:
        return {'sent': self.sent, 'failed': self.failed, 'error': self.error}


class StoreDirectory(Protocol):
    def list_stores(self) -> list[StoreRef]: ...


class WorkerDirectory(Protocol):
    def list_workers_by_store_and_role(self, store_id: int, role: CompanyRole) -> list[WorkerRef]: ...

    def list_workers_by_roles(self, roles: tuple[CompanyRole, ...]) -> list[NotifiableWorker]: ...

    def list_notifiable_workers(self, worker_ids: list[int]) -> list[NotifiableWorker]: ...


class InventoryActStore(Protocol):
    def upsert_acts(self, candidates: list[ActCandidate]) -> list[ActRow]: ...

    def update_acts_status(
        self,
        *,
        week_year: int,
        week_number: int,
        from_status: InventoryActStatus,
        to_status: InventoryActStatus,
    ) -> list[ActRow]: ...


class ShiftDirectory(Protocol):
    def list_open_shift_workers(self) -> list[NotifiableWorker]: ...


class NotificationDispatcher(Protocol):
    async def send_batch(self, messages: list[PushMessage]) -> NotificationOutcome: ...
