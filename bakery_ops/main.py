from fastapi import FastAPI

from bakery_ops.logging_config import configure_logging
from bakery_ops.routers import inventory_acts, scheduler
from bakery_ops.security.headers import install_security_headers

configure_logging()

app = FastAPI(title='Bakery Ops Scheduler')

install_security_headers(app)

app.include_router(scheduler.router)
app.include_router(inventory_acts.router)


@app.get('/healthz')
def healthz() -> dict:
    return {'status': 'ok'}
