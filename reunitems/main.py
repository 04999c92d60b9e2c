# file: reunitems/main.py
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from reunitems.core.cleanup import cleanup_expired_tokens, cleanup_old_audit_logs
from reunitems.core.config import CORS_ORIGINS, SCHEDULER_ENABLED
from reunitems.core.errors import ReunitemsError, StoreError
from reunitems.core.logger import setup_logging
from reunitems.core.rate_limit import limiter

# ------------------------------
# Routers
# ------------------------------
from reunitems.USERS.routes_auth import router as auth_router
from reunitems.USERS.user_routes import router as user_router
from reunitems.ORGS.org_routes import router as org_router
from reunitems.ORGS.owner_routes import router as owner_router
from reunitems.ITEMS.item_routes import router as item_router, search_router
from reunitems.CLAIMS.claim_routes import router as claim_router
from reunitems.REQUESTS.request_routes import router as request_router

setup_logging()
logger = logging.getLogger("reunitems.main")

# App initialization
app = FastAPI(title="ReunItems API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiter
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
            "code": "rate_limited",
        },
    )


@app.exception_handler(ReunitemsError)
async def reunitems_error_handler(request: Request, exc: ReunitemsError):
    if isinstance(exc, StoreError) or exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router)
app.include_router(user_router)
app.include_router(org_router)
app.include_router(owner_router)
app.include_router(search_router)
app.include_router(item_router)
app.include_router(claim_router)
app.include_router(request_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


# ------------------------------
# Scheduled maintenance
# ------------------------------
@app.on_event("startup")
async def startup_event():
    if not SCHEDULER_ENABLED:
        logger.info("[SCHEDULER] disabled")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(cleanup_expired_tokens, "interval", days=1)
    scheduler.add_job(cleanup_old_audit_logs, "interval", days=1)
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info("[SCHEDULER] Token and audit log cleanup scheduled daily.")


@app.on_event("shutdown")
async def shutdown_event():
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.shutdown(wait=False)
