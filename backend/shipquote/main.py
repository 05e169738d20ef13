from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shipquote.core.config import settings
from shipquote.core.logging import configure_logging
from shipquote.api.v1 import api_v1
from shipquote.db.session import dispose_engine


logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("starting %s env=%s", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    dispose_engine()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Frontend allow-list (comma separated), e.g.
# BACKEND_CORS_ORIGINS=http://localhost:5173,https://shop.local.test
origins = [o.strip() for o in settings.BACKEND_CORS_ORIGINS.split(",") if o.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# Origin check for mutating methods; requests without Origin (curl, health checks) pass
TRUSTED = set(origins)


@app.middleware("http")
async def origin_check(request: Request, call_next):
    if request.method in {"POST", "PUT", "PATCH", "DELETE"}:
        origin = request.headers.get("origin")
        if origin and origin not in TRUSTED:
            return JSONResponse(status_code=403, content={"detail": "Bad Origin"})
    return await call_next(request)


app.include_router(api_v1, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    return {
        "app": settings.PROJECT_NAME,
        "env": settings.ENVIRONMENT,
        "ok": True,
    }
