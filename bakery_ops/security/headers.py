from fastapi import FastAPI, Request
from starlette.responses import Response


API_RESPONSE_HEADERS = {
    "X-Robots-Tag": "noindex, nofollow, noarchive",
    "X-Content-Type-Options": "nosniff",
    # Scheduler and dashboard payloads reflect live act state.
    "Cache-Control": "no-store",
}


def install_security_headers(app: FastAPI) -> None:
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers.update(API_RESPONSE_HEADERS)
        return response
