"""FastAPI entrypoint for the zettelkasten index."""

from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from zkindex.app_state import IndexAppState
from zkindex.config import configure_logging, load_settings
from zkindex.errors import (
    InvalidArgument,
    InvalidContext,
    NoMatches,
    NoteNotFound,
    NotNarrowed,
    UnknownCommand,
)
from zkindex.models import CommandRequest, HistoryResponsePayload, NotePayload, ViewPayload

logger = logging.getLogger(__name__)

app = FastAPI(title="zkindex", description="Narrowable zettelkasten index")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

state: Optional[IndexAppState] = None

NO_VIEW = "No index view is open"


def get_state() -> IndexAppState:
    global state
    if state is None:
        state = IndexAppState()
    return state


@app.get("/", tags=["health"])
async def root():
    return {"status": "ok", "message": "zkindex is running"}


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "message": "zkindex is running"}


@app.get("/view", response_model=ViewPayload, tags=["view"])
def view():
    payload = get_state().view()
    if payload is None:
        raise HTTPException(status_code=409, detail=NO_VIEW)
    return payload


@app.post("/command", tags=["view"])
def command(request: CommandRequest):
    try:
        payload = get_state().dispatch(request.name, request.args)
    except NoMatches as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (NotNarrowed, InvalidContext) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except (InvalidArgument, UnknownCommand) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("Command %s failed", request.name)
        raise HTTPException(status_code=500, detail=str(exc))

    if payload is None:
        return {"success": True, "open": False}
    return payload.model_dump(mode="json")


@app.get("/note-at-cursor", response_model=NotePayload, tags=["view"])
def note_at_cursor():
    try:
        payload = get_state().note_at_cursor()
    except InvalidContext:
        raise HTTPException(status_code=409, detail=NO_VIEW)
    except NoteNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    if payload is None:
        raise HTTPException(status_code=409, detail="The index view is empty")
    return payload


@app.get("/history", response_model=HistoryResponsePayload, tags=["view"])
def history():
    return get_state().history()


def run() -> None:
    global state
    settings = load_settings()
    configure_logging(settings)
    state = IndexAppState(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
