from contextlib import asynccontextmanager
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from keyshift.api import transform
from keyshift.config import settings

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", env=settings.APP_ENV, version="1.0.0")
    try:
        from keyshift.core.storage import init_storage
        await init_storage()
        log.info("storage_ready")
    except Exception as e:
        log.warning("storage_not_available", error=str(e))
    from keyshift.core.render import ffmpeg_available
    if ffmpeg_available(settings.FFMPEG_BINARY):
        log.info("ffmpeg_ready", binary=settings.FFMPEG_BINARY)
    else:
        log.warning("ffmpeg_not_available", binary=settings.FFMPEG_BINARY)
    log.info("startup_complete")
    yield
    log.info("shutdown")


app = FastAPI(
    title="Keyshift",
    description="Transponerar och tempojusterar ljudfiler utifrån tonart och BPM i filnamnet",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS: List[str] i config, men env kan skicka "*" som sträng
cors_origins = settings.CORS_ORIGINS
if isinstance(cors_origins, str):
    cors_origins = [o.strip() for o in cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transform.router, prefix="/api/v1/transform", tags=["Transform"])


@app.get("/health", tags=["System"])
async def health():
    return {"status": "ok", "version": "1.0.0", "env": settings.APP_ENV}


@app.get("/", tags=["System"])
async def root():
    return {"name": "Keyshift API", "docs": "/docs", "health": "/health"}
