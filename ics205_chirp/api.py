"""FastAPI interface for ICS-205 to CHIRP conversion"""
import logging
import time
from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ConverterConfig
from .converter import ChannelConverter
from .errors import ConversionError, ConversionFailed
from .text_extractor import TextExtractor


logger = logging.getLogger(__name__)

SERVICE_NAME = "ics205-chirp"
VERSION = "1.0.0"
PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}

config = ConverterConfig.from_env()

app = FastAPI(title="ICS-205 to CHIRP CSV Converter", version=VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.allowed_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    max_age=86400,
)


# Initialize converter
converter: Optional[ChannelConverter] = None


@app.on_event("startup")
async def startup_event():
    """Initialize converter on startup"""
    global converter
    try:
        converter = ChannelConverter.from_config(config)
    except ConversionError as e:
        logger.warning("Failed to initialize converter: %s", e)


async def read_pdf_upload(pdf: Optional[UploadFile]) -> bytes:
    """Validate an uploaded PDF and return its bytes"""
    if pdf is None:
        raise HTTPException(status_code=400,
                            detail="No PDF file uploaded. Please upload an ICS-205 PDF file.")
    if pdf.content_type not in PDF_CONTENT_TYPES:
        raise HTTPException(status_code=400,
                            detail="Invalid file type. Please upload a PDF file.")

    pdf_bytes = await pdf.read()
    if len(pdf_bytes) > config.max_upload_bytes:
        limit_mb = config.max_upload_bytes // (1024 * 1024)
        raise HTTPException(status_code=413,
                            detail=f"File too large. Maximum size is {limit_mb}MB.")
    if not pdf_bytes:
        raise HTTPException(status_code=400, detail="Uploaded PDF is empty.")
    return pdf_bytes


@app.get("/")
async def root():
    """Service description"""
    return {
        "service": "ICS-205 to CHIRP CSV Converter",
        "version": VERSION,
        "endpoints": {
            "POST /convert": "Convert ICS-205 PDF to CHIRP CSV",
            "POST /debug-text": "Extract text from PDF (no parsing)",
            "GET /health": "Health check",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "converter_initialized": converter is not None,
    }


@app.post("/convert")
async def convert_upload(pdf: Optional[UploadFile] = File(None)):
    """
    Convert an uploaded ICS-205 PDF to CHIRP CSV.

    Accepts:
    - pdf: Uploaded PDF file

    Returns the CSV text, output filename and channel count.
    """
    if converter is None:
        raise HTTPException(status_code=503, detail="Converter not initialized")

    pdf_bytes = await read_pdf_upload(pdf)
    filename = pdf.filename or ""
    start_ts = time.perf_counter()
    logger.info("conversion_started filename=%s size=%d", filename, len(pdf_bytes))

    try:
        # Conversion blocks on PDF parsing and model calls
        payload = await run_in_threadpool(converter.convert_to_payload, pdf_bytes, filename)
    except ConversionFailed as e:
        duration_ms = int((time.perf_counter() - start_ts) * 1000)
        logger.warning("conversion_failed filename=%s duration_ms=%d reason=%s",
                       filename, duration_ms, e.cause_reason)
        return JSONResponse(status_code=422, content={
            "success": False,
            "error": str(e),
            "reason": e.cause_reason,
        })

    duration_ms = int((time.perf_counter() - start_ts) * 1000)
    logger.info("conversion_completed filename=%s duration_ms=%d channels=%d tier=%s",
                filename, duration_ms, payload["channelCount"], payload["tier"])
    return {"success": True, **payload, "duration": duration_ms}


@app.post("/debug-text")
async def debug_text(pdf: Optional[UploadFile] = File(None)):
    """Extract the text layer of an uploaded PDF without parsing channels"""
    pdf_bytes = await read_pdf_upload(pdf)
    try:
        extracted = await run_in_threadpool(TextExtractor().extract, pdf_bytes)
    except ConversionError as e:
        return JSONResponse(status_code=422, content={
            "success": False,
            "error": str(e),
            "reason": e.reason,
        })

    return {
        "success": True,
        "filename": pdf.filename,
        "pages": extracted.page_count,
        "textLength": extracted.char_count,
        "text": extracted.text,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
