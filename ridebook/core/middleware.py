import time
from fastapi import Request
from ridebook.core.logger import get_logger

logger = get_logger("ridebook.requests")

async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    logger.info(f"-> {request.method} {request.url.path}")
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    logger.info(
        f"<- {request.method} {request.url.path} "
        f"status={response.status_code} elapsed={elapsed:.3f}s"
    )
    return response
