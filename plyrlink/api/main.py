from datetime import datetime, timezone
from typing import List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from plyrlink.core.config import get_settings
from plyrlink.providers.base import InputError
from plyrlink.providers.runner import VideoLinkExtractor

app = FastAPI(title="plyrlink | HLS link extractor")

HOME_HTML = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8"/>
    <title>plyrlink</title>
  </head>
  <body>
    <nav>
      <a href="/">Home</a>
      <a href="/healthz">Health</a>
      <a href="/docs">API Docs</a>
    </nav>
    <h1>plyrlink</h1>
    <p>Resolve a landing page to its HLS manifest:
      <code>/api/extract?url=https://...</code></p>
  </body>
</html>
"""


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.get("/", response_class=HTMLResponse)
async def read_index():
    return HOME_HTML


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/extract")
async def extract_link(url: Optional[List[str]] = Query(None)):
    # A repeated ?url= arrives as several values and is rejected like a missing one
    if not url or len(url) != 1 or not url[0]:
        raise InputError("Missing or invalid url query parameter")
    url = url[0]

    try:
        extractor = VideoLinkExtractor(sandbox=get_settings().sandbox)
        result = await extractor.extract(url)
    except Exception as e:
        return JSONResponse(status_code=500, content={"error": str(e) or "Internal Server Error"})
    return result.to_dict()
