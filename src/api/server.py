#!/usr/bin/env python
"""FastAPI server for the roastreel web interface."""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import close_roast_pipeline, get_config
from api.routers import core, roasts
from utils.logging import setup_logging

config = get_config()
setup_logging(config.get("log_level", "INFO"), json_output=config.get("log_json", False))


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await close_roast_pipeline()


app = FastAPI(title="roastreel API", version="0.1.0", lifespan=lifespan)

# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body validation failures in the same shape as pipeline errors."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=422, content={"ok": False, "error": "; ".join(messages)})


app.include_router(core.router)
app.include_router(roasts.router)
