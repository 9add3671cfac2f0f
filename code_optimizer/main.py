"""
Code Optimizer FastAPI Application.

Advisory, line-level optimization suggestions over HTTP:
  POST /analyze        → suggestions for one source text
  POST /analyze/batch  → suggestions for several files, cached + audited
  GET  /rules          → the rule catalog
  GET  /health         → {"status": "ok", ...}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from code_optimizer.api.routes.analyze import router as analyze_router
from code_optimizer.api.routes.health import router as health_router
from code_optimizer.api.routes.rules import router as rules_router
from code_optimizer.config import VERSION, settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("code_optimizer")

app = FastAPI(
    title="Code Optimizer",
    description="Multi-language, rule-based optimization suggestions",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(rules_router)
app.include_router(analyze_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(
        f"Validation Error. Raw body: {body.decode('utf-8', errors='replace')[:500]} "
        f"| Errors: {exc.errors()}"
    )
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "body": body.decode("utf-8", errors="replace")[:100]},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx can carry the raw exception raised inside a validator
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]
