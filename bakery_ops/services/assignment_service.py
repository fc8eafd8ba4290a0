from __future__ import annotations

from bakery_ops.models import COUNT_DUTY_ROLE
from bakery_ops.services.collaborators import WorkerDirectory


def resolve_responsible_worker(workers: WorkerDirectory, store_id: int) -> int | None:
    # The directory returns candidates in assignment order; the earliest wins.
    candidates = workers.list_workers_by_store_and_role(store_id, COUNT_DUTY_ROLE)
    if not candidates:
        return None
    return candidates[0].id
