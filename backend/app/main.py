"""UNIVERSO EDU — FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.errors import GenerationError, NotFoundError, ValidationError
from app.middleware.auth import ensure_bootstrap_admin
from app.middleware.rate_limit import limiter
from app.routers import admin, auth, chat, readings, tasks
from app.services.ai_client import gateway
from app.services.scheduler import PublicationScheduler

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

# ── CORS origins from env (supports dev localhost + production domain) ──────
_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="UNIVERSO EDU",
    description="Tasks, daily readings and the EDU chatbot for 6th grade students.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Service errors → HTTP ────────────────────────────────────────────────────

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


@app.exception_handler(GenerationError)
async def generation_handler(request: Request, exc: GenerationError):
    logger.error("Content generation failed: %s", exc)
    return JSONResponse(
        status_code=502,
        content={"success": False, "error": "No se pudo generar el contenido. Intenta de nuevo."},
    )


# Routers
app.include_router(auth.router)
app.include_router(chat.router)
app.include_router(tasks.router)
app.include_router(readings.router)
app.include_router(admin.router)

scheduler = PublicationScheduler(SessionLocal, gateway)


@app.on_event("startup")
async def on_startup():
    """Bootstrap the admin account, start the scheduler and log the AI provider."""
    with SessionLocal() as db:
        if ensure_bootstrap_admin(db):
            logger.info("Bootstrap admin created: %s", settings.ADMIN_EMAIL)

    if settings.SCHEDULER_ENABLED:
        scheduler.start()

    provider = gateway.provider_name()
    if provider == "none":
        print("\n" + "="*60)
        print("  ⚠  AI NOT CONFIGURED — using the built-in mock responder")
        print("  Set at least one provider key in backend/.env:")
        print("    GROQ_API_KEY=gsk_...")
        print("    QWEN_API_KEY=sk-...")
        print("  and restart. Visit /api/health/ai to verify.")
        print("="*60 + "\n")
    else:
        print(f"\n  ✓  AI provider: {provider}\n")


@app.on_event("shutdown")
async def on_shutdown():
    await scheduler.stop()


@app.get("/")
def root():
    return {
        "name": "UNIVERSO EDU API",
        "version": "1.0.0",
        "docs": "/docs",
        "ai_provider": gateway.provider_name(),
    }


@app.get("/health")
def health():
    return {"status": "ok", "ai_provider": gateway.provider_name(), **gateway.status()}


@app.get("/api/health/ai")
async def health_ai():
    """Live connectivity test for the configured AI provider.

    Returns:
        provider: which AI is active
        status:   "ok" | "unconfigured"
        test_reply: result of a tiny test call
    """
    return await gateway.health_check()
