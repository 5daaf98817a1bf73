#!/usr/bin/env python3
"""
FastAPI service for the Georgian trainer.

The API drives the same session controller as the console program in
learn.py. Clients start a session for one module, fetch the current
question, submit answers and move on. Sessions are kept in memory only and
disappear when they are deleted or the process exits.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, List, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

import catalog
from controller import (
    ADVANCE_DELAY,
    NoActiveQuestion,
    QuestionAlreadyAnswered,
    SessionClosed,
    SessionController,
    SessionNotFound,
    SessionRegistry,
)
from questions import Question
from scheduler import ENV_PREFIX, SchedulerConfig, SessionStats, config_from_env

logger = logging.getLogger(__name__)

Category = Literal["letters", "words"]
ItemKindName = Literal["letter", "word", "phrase"]

ADVANCE_DELAY_ENV = "GEO_TRAINER_ADVANCE_DELAY"

app = FastAPI(
    title="Georgian Trainer API",
    description="API для изучения грузинского алфавита, слов и фраз.",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _advance_delay_from_env() -> float:
    raw = os.environ.get(ADVANCE_DELAY_ENV, "").strip()
    if not raw:
        return ADVANCE_DELAY
    try:
        return max(0.0, float(raw))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", ADVANCE_DELAY_ENV, raw)
        return ADVANCE_DELAY


def _scheduler_config_from_env() -> SchedulerConfig:
    try:
        return config_from_env()
    except ValidationError as exc:
        names = ", ".join(ENV_PREFIX + str(error["loc"][0]).upper() for error in exc.errors())
        logger.warning("Ignoring invalid %s, using defaults", names)
        return SchedulerConfig()


_registry = SessionRegistry(
    config=_scheduler_config_from_env(),
    advance_delay=_advance_delay_from_env(),
)


def get_registry() -> SessionRegistry:
    return _registry


def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionController:
    try:
        return registry.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Сессия не найдена.")


class ModuleOut(BaseModel):
    id: Category
    label: str
    description: str
    total_items: int


class ItemOut(BaseModel):
    id: str
    kind: ItemKindName
    source_text: str
    target_text: str
    transliteration: Optional[str] = None
    pronunciation_note: Optional[str] = None
    tokens: List[str] = Field(default_factory=list)


class SessionCreate(BaseModel):
    category: Category
    seed: Optional[int] = None


class QuestionOut(BaseModel):
    item_id: str
    template: str
    kind: str
    instruction: str
    prompt: str
    options: List[str]
    pool: List[str]
    required_length: Optional[int] = None
    hint: Optional[str] = None
    solution: Optional[str] = None


class StatsOut(BaseModel):
    total: int
    mastered: int
    remaining: int
    answered: int
    correct: int
    accuracy_percent: int
    progress_percent: int


class SessionOut(BaseModel):
    session_id: str
    category: Category
    complete: bool
    finished: bool
    answered: bool
    advance_pending: bool
    question: Optional[QuestionOut] = None
    stats: StatsOut


class AnswerRequest(BaseModel):
    answer: Optional[str] = None
    tiles: Optional[List[int]] = None
    revealed: bool = False


class AnswerOut(BaseModel):
    item_id: str
    correct: bool
    revealed: bool
    correct_answer: str
    mastered: bool
    complete: bool
    auto_advance: bool
    stats: StatsOut


def _item_out(item: catalog.Item) -> ItemOut:
    return ItemOut(
        id=item.id,
        kind=item.kind.value,
        source_text=item.source_text,
        target_text=item.target_text,
        transliteration=getattr(item, "transliteration", None),
        pronunciation_note=getattr(item, "pronunciation_note", None),
        tokens=list(getattr(item, "tokens", ())),
    )


def _stats_out(stats: SessionStats) -> StatsOut:
    return StatsOut(**stats.to_dict())


def _question_out(question: Question, include_solution: bool = False) -> QuestionOut:
    return QuestionOut(**question.to_dict(include_solution=include_solution))


def _session_out(
    session_id: str,
    controller: SessionController,
    include_solution: bool = False,
) -> SessionOut:
    question = controller.current
    return SessionOut(
        session_id=session_id,
        category=controller.category,
        complete=controller.is_complete(),
        finished=controller.finished,
        answered=controller.answered,
        advance_pending=controller.advance_pending,
        question=_question_out(question, include_solution) if question else None,
        stats=_stats_out(controller.stats()),
    )


@app.get("/")
def root() -> Dict[str, str]:
    return {"message": "Georgian Trainer API готов к работе."}


@app.get("/modules", response_model=List[ModuleOut])
def list_modules() -> List[ModuleOut]:
    return [
        ModuleOut(
            id=key,
            label=label,
            description=description,
            total_items=len(catalog.list_items(key)),
        )
        for key, label, description in catalog.CATEGORIES
    ]


@app.get("/items", response_model=List[ItemOut])
def browse_items(category: Optional[Category] = Query(default=None)) -> List[ItemOut]:
    if category:
        items = catalog.list_items(category)
    else:
        items = [item for key in catalog.category_ids() for item in catalog.list_items(key)]
    return [_item_out(item) for item in items]


@app.get("/items/{item_id}", response_model=ItemOut)
def item_detail(item_id: str) -> ItemOut:
    item = catalog.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Элемент не найден.")
    return _item_out(item)


@app.post("/sessions", response_model=SessionOut, status_code=201)
def start_session(
    payload: SessionCreate,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionOut:
    try:
        session_id, controller = registry.create(payload.category, seed=payload.seed)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    controller.advance()
    return _session_out(session_id, controller)


@app.get("/sessions/{session_id}", response_model=SessionOut)
def session_detail(
    session_id: str,
    include_solution: bool = Query(default=False),
    controller: SessionController = Depends(get_session),
) -> SessionOut:
    return _session_out(session_id, controller, include_solution)


@app.get("/sessions/{session_id}/question", response_model=QuestionOut)
def current_question(
    include_solution: bool = Query(default=False),
    controller: SessionController = Depends(get_session),
) -> QuestionOut:
    question = controller.current
    if question is None:
        raise HTTPException(status_code=409, detail="Нет активного вопроса.")
    return _question_out(question, include_solution)


@app.post("/sessions/{session_id}/answers", response_model=AnswerOut)
def submit_answer(
    payload: AnswerRequest,
    controller: SessionController = Depends(get_session),
) -> AnswerOut:
    try:
        result = controller.submit(
            answer=payload.answer,
            tiles=payload.tiles,
            revealed=payload.revealed,
        )
    except (NoActiveQuestion, QuestionAlreadyAnswered, SessionClosed) as exc:
        raise HTTPException(status_code=409, detail=str(exc) or exc.__class__.__name__)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return AnswerOut(
        item_id=result.item_id,
        correct=result.correct,
        revealed=result.revealed,
        correct_answer=result.correct_answer,
        mastered=result.mastered,
        complete=result.complete,
        auto_advance=result.auto_advance,
        stats=_stats_out(result.stats),
    )


@app.post("/sessions/{session_id}/next", response_model=SessionOut)
def next_question(
    session_id: str,
    controller: SessionController = Depends(get_session),
) -> SessionOut:
    try:
        controller.advance()
    except SessionClosed:
        raise HTTPException(status_code=409, detail="Сессия закрыта.")
    return _session_out(session_id, controller)


@app.get("/sessions/{session_id}/stats", response_model=StatsOut)
def session_stats(controller: SessionController = Depends(get_session)) -> StatsOut:
    return _stats_out(controller.stats())


@app.delete("/sessions/{session_id}", status_code=204)
def end_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> Response:
    try:
        registry.remove(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Сессия не найдена.")
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
