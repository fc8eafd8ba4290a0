from sqlalchemy import select

from bakery_ops.db import SessionLocal, engine
from bakery_ops.models import Base, CompanyRole, Store, Worker, WorkerStoreAssignment

DEMO_STORES = ['Lenta #12', 'Magnit #4', 'Okey #7']
DEMO_WORKERS = [
    ('Anna Baker', CompanyRole.BAKER, 'ExponentPushToken[demo-baker-1]', 'Lenta #12'),
    ('Ivan Baker', CompanyRole.BAKER, 'ExponentPushToken[demo-baker-2]', 'Magnit #4'),
    ('Olga Manager', CompanyRole.MANAGER, 'ExponentPushToken[demo-manager]', None),
    ('Petr Owner', CompanyRole.OWNER, None, None),
]


def seed() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        stores_by_name = {store.name: store for store in db.execute(select(Store)).scalars().all()}
        for name in DEMO_STORES:
            if name not in stores_by_name:
                store = Store(name=name)
                db.add(store)
                stores_by_name[name] = store
        db.flush()

        for full_name, role, push_token, store_name in DEMO_WORKERS:
            worker = db.execute(select(Worker).where(Worker.full_name == full_name)).scalar_one_or_none()
            if not worker:
                worker = Worker(full_name=full_name, company_role=role, push_token=push_token, is_active=True)
                db.add(worker)
                db.flush()

            if not store_name:
                continue
            store = stores_by_name[store_name]
            assignment = db.execute(
                select(WorkerStoreAssignment).where(
                    WorkerStoreAssignment.worker_id == worker.id,
                    WorkerStoreAssignment.store_id == store.id,
                )
            ).scalar_one_or_none()
            if not assignment:
                db.add(WorkerStoreAssignment(worker_id=worker.id, store_id=store.id))

        db.commit()


if __name__ == '__main__':
    seed()
    print('Seed data inserted/verified.')
