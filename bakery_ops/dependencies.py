from fastapi import Depends
from sqlalchemy.orm import Session

from bakery_ops.db import get_db
from bakery_ops.services.provider_factory import get_push_dispatcher
from bakery_ops.services.scheduler_service import SchedulerJobs
from bakery_ops.services.sql_repository import (
    SqlInventoryActStore,
    SqlShiftDirectory,
    SqlStoreDirectory,
    SqlWorkerDirectory,
)


def build_scheduler_jobs(db: Session) -> SchedulerJobs:
    return SchedulerJobs(
        stores=SqlStoreDirectory(db),
        workers=SqlWorkerDirectory(db),
        acts=SqlInventoryActStore(db),
        notifier=get_push_dispatcher(),
    )


def get_scheduler_jobs(db: Session = Depends(get_db)) -> SchedulerJobs:
    return build_scheduler_jobs(db)


def get_shift_directory(db: Session = Depends(get_db)) -> SqlShiftDirectory:
    return SqlShiftDirectory(db)
