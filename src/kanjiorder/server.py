import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from kanjiorder.application.config import AppConfig, resolve_config
from kanjiorder.application.service import LearningOrderService, OrderSnapshot
from kanjiorder.consts import VERSION
from kanjiorder.domain.errors import KanjiOrderError, NotFoundError
from kanjiorder.domain.models import Character

logger = logging.getLogger("kanjiorder.server")


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CharacterEntry(BaseModel):
    position: int
    id: str
    kind: str
    components: list[str]
    frequency: int | None = None
    grade_level: int | None = None
    stroke_count: int | None = None
    meaning: str = ""


class OrderResponse(BaseModel):
    total: int
    characters: list[CharacterEntry]


class CharacterDetail(CharacterEntry):
    readings: list[str]
    dependents: list[str]
    ancestor_count: int
    descendant_count: int


def _entry(position: int, character: Character) -> CharacterEntry:
    return CharacterEntry(
        position=position,
        id=character.id,
        kind=character.kind,
        components=list(dict.fromkeys(character.components)),
        frequency=character.frequency,
        grade_level=character.grade_level,
        stroke_count=character.stroke_count,
        meaning=character.meaning,
    )


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the HTTP API around a LearningOrderService for `config`."""
    service = LearningOrderService(config or resolve_config())
    start_time = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"kanjiorder server v{VERSION} starting up...")
        yield
        logger.info("kanjiorder server shutting down...")

    app = FastAPI(
        title="kanjiorder",
        description="Read API for the kanji learning order.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.service = service

    def current_snapshot(request: Request) -> OrderSnapshot:
        try:
            return request.app.state.service.snapshot
        except KanjiOrderError as e:
            logger.error(f"Corpus failed to load: {e}")
            raise HTTPException(status_code=500, detail=str(e)) from e

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Simple health check to verify server is reachable.
        """
        return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)

    @app.get("/version")
    async def get_version():
        return {"version": VERSION}

    @app.get("/order", response_model=OrderResponse)
    def get_order(
        request: Request,
        kind: str | None = None,
        max_grade: int | None = None,
        max_strokes: int | None = None,
    ):
        """The full learning order, optionally filtered."""
        if kind is not None and kind not in ("radical", "kanji"):
            raise HTTPException(status_code=400, detail=f"Unknown kind '{kind}'")

        snapshot = current_snapshot(request)

        def keep(c: Character) -> bool:
            if kind is not None and c.kind != kind:
                return False
            if max_grade is not None and (c.grade_level is None or c.grade_level > max_grade):
                return False
            if max_strokes is not None and (
                c.stroke_count is None or c.stroke_count > max_strokes
            ):
                return False
            return True

        entries = [_entry(pos, c) for pos, c in snapshot.query.filter(keep)]
        return OrderResponse(total=len(entries), characters=entries)

    @app.get("/order/{char_id}/prefix", response_model=OrderResponse)
    def get_prefix(request: Request, char_id: str):
        """Everything that must be learned to reach `char_id`, inclusive."""
        snapshot = current_snapshot(request)
        try:
            ids = snapshot.query.range_up_to(char_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from None

        entries = [_entry(pos, snapshot.corpus.get(cid)) for pos, cid in enumerate(ids)]
        return OrderResponse(total=len(entries), characters=entries)

    @app.get("/characters/{char_id}", response_model=CharacterDetail)
    def get_character(request: Request, char_id: str):
        snapshot = current_snapshot(request)
        try:
            character = snapshot.graph.node(char_id)
            position = snapshot.query.index_of(char_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from None

        graph = snapshot.graph
        return CharacterDetail(
            **_entry(position, character).model_dump(),
            readings=list(character.readings),
            dependents=graph.get_dependents(char_id),
            ancestor_count=len(graph.ancestors(char_id)),
            descendant_count=len(graph.descendants(char_id)),
        )

    return app
