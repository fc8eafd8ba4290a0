from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bakery_ops.db import get_db
from bakery_ops.models import InventoryActStatus
from bakery_ops.services.inventory_act_service import list_acts_for_dashboard

router = APIRouter(prefix='/inventory-acts', tags=['inventory-acts'])


@router.get('')
def list_inventory_acts(
    store_id: int | None = None,
    week_year: int | None = None,
    week_number: int | None = Query(default=None, ge=1, le=53),
    status: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    try:
        status_filter = InventoryActStatus(status.strip().lower()) if status else None
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f'Invalid status filter: {status}') from exc

    return {
        'acts': list_acts_for_dashboard(
            db,
            store_id=store_id,
            week_year=week_year,
            week_number=week_number,
            status=status_filter,
            limit=limit,
        )
    }
