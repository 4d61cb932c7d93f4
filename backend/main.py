import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from models.responses import RankingCancelledResponse
from services.engine import MatchingEngine
from services.errors import NotFoundError, RankingCancelledError
from services.store import InMemoryStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "engine", None) is None:
        store = InMemoryStore.from_yaml(settings.seed_file) if settings.seed_file else InMemoryStore()
        # InvalidWeightsError here aborts startup
        app.state.engine = await MatchingEngine.create(store, settings.engine_config())
        logger.info("Matching engine ready (%d skills)", len(app.state.engine.taxonomy))
    yield


app = FastAPI(
    title="Job Match API",
    description="Candidate-job matching and ranking engine",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RankingCancelledError)
async def ranking_cancelled_handler(request: Request, exc: RankingCancelledError):
    body = RankingCancelledResponse(
        detail=str(exc),
        scored=exc.scored,
        skipped=exc.partial.skipped,
    )
    return JSONResponse(status_code=503, content=body.model_dump())


app.include_router(router)
