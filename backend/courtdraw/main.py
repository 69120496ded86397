import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courtdraw.database import init_db
from courtdraw.errors import FixtureError
from courtdraw.routes import fixtures, matches, tournaments

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="CourtDraw Tournament API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FixtureError)
async def fixture_error_handler(request: Request, exc: FixtureError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])
app.include_router(fixtures.router, prefix="/api", tags=["fixtures"])
# Match results + progression
app.include_router(matches.router, prefix="/api", tags=["matches"])


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("Registered routes:")
    for route in app.routes:
        methods = getattr(route, "methods", None)
        if methods:
            logger.info("  %s %s", ",".join(sorted(methods)), route.path)


@app.get("/")
def root():
    return {"message": "CourtDraw Tournament API"}


@app.get("/api/health")
def health():
    return {"status": "ok"}
