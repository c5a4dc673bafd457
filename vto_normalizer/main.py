import logging
from typing import Any

from fastapi import Body, Depends, FastAPI, UploadFile, File, HTTPException, Request
from fastapi.responses import JSONResponse

from .export import build_export_text, export_filename
from .models import ExportText, HealthResponse, NormalizeResponse, VtoDocument
from .normalize import (
    DocumentDecodeError,
    load_document_bytes,
    normalize_document,
    normalize_payload,
)
from .rules import MAX_UPLOAD_BYTES
from .schema import default_document

logger = logging.getLogger(__name__)

app = FastAPI(
    title="vto-normalizer",
    description="Deterministic normalization and export sanitization for VTO documents",
    version="0.1.0",
)

def limit_body(request: Request):
    length = request.headers.get("content-length", "")
    if length.isdigit() and int(length) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"Body exceeds {MAX_UPLOAD_BYTES} bytes")

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.get("/document/default", response_model=VtoDocument)
def new_document():
    return default_document()

@app.post("/normalize", response_model=NormalizeResponse, dependencies=[Depends(limit_body)])
def normalize(payload: Any = Body(None)):
    return normalize_payload(payload)

@app.post("/import", response_model=NormalizeResponse)
async def import_document(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(".json"):
        raise HTTPException(status_code=422, detail="Only JSON files are supported")

    raw = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File exceeds {MAX_UPLOAD_BYTES} bytes")

    try:
        result = load_document_bytes(raw)
    except DocumentDecodeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info(
        "imported %r (%d bytes, decoded as %s, %d warnings)",
        file.filename,
        len(raw),
        result["report"]["normalizations"]["encoding"]["decode_used"],
        result["report"]["summary"]["warnings"],
    )
    return result

@app.post("/export", response_model=ExportText, dependencies=[Depends(limit_body)])
def export_text(payload: Any = Body(None)):
    return build_export_text(payload)

@app.post("/export/json", dependencies=[Depends(limit_body)])
def export_json(payload: Any = Body(None)):
    doc = normalize_document(payload)
    filename = export_filename(doc, ".json")
    return JSONResponse(
        content=doc,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
