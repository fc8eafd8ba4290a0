from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, status

from bakery_ops.config import settings


def require_trigger_token(request: Request) -> None:
    expected = settings.scheduler_trigger_token
    if not expected:
        return

    scheme, _, token = request.headers.get('authorization', '').partition(' ')
    if scheme.lower() != 'bearer' or not secrets.compare_digest(token.strip(), expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid trigger token')
