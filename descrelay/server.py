# descrelay/server.py
"""
Receiver for delivered extraction results.

POST /data takes {title, description?}, asks a chat-completions model which
song the video is, and answers {result, cached}. Answers are cached on disk
per (title, description) for CACHE_TTL seconds.
"""
from __future__ import annotations

import hashlib
import json
import time
from pathlib import Path
from typing import Optional

import requests
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import config
from .log import err, info

UNKNOWN = "unknown"

SYSTEM_PROMPT = (
    "You are a music expert. From the given video title and description, infer the song "
    "and the performing artist. Reply only in the form 'Artist - Song', nothing else. "
    "Separate multiple artists with commas. If the title says Cover, reply "
    "'Cover artist - Song (Original artist)'. If only the artist or only the song can be "
    "determined, reply with that. If nothing can be determined, reply 'unknown'."
)


class VideoData(BaseModel):
    title: str
    description: Optional[str] = None


class AnalysisResult(BaseModel):
    result: str
    cached: bool


# ---------- Cache ----------

def cache_key(title: str, description: str) -> str:
    h = hashlib.sha256()
    h.update(title.encode("utf-8"))
    h.update(description.encode("utf-8"))
    return h.hexdigest()


def _cache_file(title: str, description: str) -> Path:
    cache_dir = Path(config.CACHE_DIR)
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir / cache_key(title, description)


def get_cached(title: str, description: str, ttl: Optional[int] = None) -> Optional[str]:
    ttl = config.CACHE_TTL if ttl is None else ttl
    path = _cache_file(title, description)
    if not path.exists():
        return None
    try:
        entry = json.loads(path.read_text(encoding="utf-8"))
        stamp = float(entry["timestamp"])
        result = entry["result"]
    except (OSError, ValueError, TypeError, KeyError):
        return None
    if not isinstance(result, str):
        return None
    if time.time() - stamp < ttl:
        return result
    return None


def set_cached(title: str, description: str, result: str) -> None:
    path = _cache_file(title, description)
    try:
        path.write_text(json.dumps({"result": result, "timestamp": int(time.time())}), encoding="utf-8")
    except OSError as e:
        err(f"server: cache write failed :: {e}")


# ---------- Analysis ----------

def analyze(title: str, description: str) -> str:
    headers = {"Content-Type": "application/json"}
    if config.LLM_KEY:
        headers["Authorization"] = f"Bearer {config.LLM_KEY}"
    body = {
        "model": config.LLM_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Identify the song and artist for this video:\nTitle: {title}\nDescription: {description}",
            },
        ],
    }
    resp = requests.post(config.LLM_URL, json=body, headers=headers, timeout=config.HTTP_TIMEOUT * 4)
    resp.raise_for_status()
    data = resp.json()
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    result = (content or UNKNOWN).strip()
    info(f"server: analysis -> {result}")
    return result


# ---------- FastAPI ----------

app = FastAPI(title="descrelay receiver")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/data", response_model=AnalysisResult)
def receive_data(data: VideoData) -> AnalysisResult:
    info(f"server: title={data.title!r}")
    description = data.description or ""

    cached = get_cached(data.title, description)
    if cached is not None:
        info(f"server: cache hit -> {cached}")
        return AnalysisResult(result=cached, cached=True)

    try:
        result = analyze(data.title, description)
    except (requests.RequestException, ValueError) as e:
        err(f"server: analysis failed :: {e}")
        raise HTTPException(status_code=500, detail="error while processing data")
    set_cached(data.title, description, result)
    return AnalysisResult(result=result, cached=False)


@app.get("/health")
def health():
    return {"ok": True}
