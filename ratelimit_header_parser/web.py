"""
Rate limit header inspection API
FastAPI backend for ratelimit-header-parser

Run with: uvicorn ratelimit_header_parser.web:app
"""

from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import __version__
from .config import default_reset_mode, load_env
from .models import ParserOptions
from .parser import get_rate_limits, parse_draft7_header

load_env()

app = FastAPI(
    title="Rate Limit Header Parser",
    description="Normalize rate-limit headers from any API into one shape",
    version=__version__,
)


class ParseRequest(BaseModel):
    headers: dict[str, str]
    reset: Optional[str] = None  # date | unix | seconds | milliseconds
    all: bool = True


class Draft7Request(BaseModel):
    value: str


@app.get("/api/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/api/parse")
async def parse_headers(request: ParseRequest):
    """Parse the rate limits carried by a set of response headers"""
    try:
        options = ParserOptions(reset=request.reset or default_reset_mode())  # type: ignore[arg-type]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    infos = get_rate_limits(request.headers, options)
    if not request.all:
        infos = infos[:1]
    return {"results": [i.to_public_dict() for i in infos]}


@app.post("/api/draft7")
async def parse_draft7(request: Draft7Request):
    """Parse a combined `RateLimit` header value"""
    return parse_draft7_header(request.value).to_public_dict()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
