# app.py
import logging
import json
from typing import Any, Dict, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from asyncio import Lock
from starlette.exceptions import HTTPException as StarletteHTTPException

from configurations.config import load_settings
from core.intent import INVALID_INTENT_LINE
from agents.intent_agent import OllamaIntentAgent
from services.billing_client import LOGIN_FAILED_TEXT, BillingClient
from executors.chat import CHAT_FAILED_TEXT, ChatExecutor
from executors.login import LoginExecutor
from models.gateway import ChatRequest, LoginRequest


settings = load_settings()

# -----------------------------
# Structured Logging Setup
# -----------------------------
class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        return json.dumps(
            {
                "time": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
                "exception": record.exc_text,
            },
            ensure_ascii=False,
        )


logger = logging.getLogger("billing_gateway")
logger.setLevel(settings.log_level)
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
if not logger.handlers:
    logger.addHandler(handler)

# -----------------------------
# FastAPI App
# -----------------------------
app = FastAPI(title="Billing Chat Gateway", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# Executors (built once from settings)
# -----------------------------
billing_client = BillingClient.from_settings(settings)

chat_executor = ChatExecutor(
    OllamaIntentAgent.from_settings(settings),
    billing_client,
    debug=settings.debug,
)
login_executor = LoginExecutor(billing_client)

# -----------------------------
# Metrics
# -----------------------------
metrics_lock = Lock()
request_counters = {
    "chat": 0,
    "login": 0,
    "invalid": 0,
    "total": 0,
    "errors": 0,
}


# -----------------------------
# Error Envelope
# -----------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(f"[INVALID REQUEST] path={request.url.path}, {message}")
    return JSONResponse(status_code=422, content={"error": message})


# -----------------------------
# API Endpoints
# -----------------------------
@app.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    return "API Gateway is running."


@app.get("/metrics")
async def metrics() -> Dict[str, Any]:
    async with metrics_lock:
        return request_counters.copy()


@app.post("/chat")
async def chat(request: ChatRequest, authorization: Optional[str] = Header(default=None)):
    async with metrics_lock:
        request_counters["total"] += 1

    logger.info(f"[REQUEST_START] route=chat, text='{request.message[:100]}'")

    try:
        response = await chat_executor.execute(request, authorization)
    except HTTPException as e:
        async with metrics_lock:
            request_counters["errors"] += 1
        logger.error(f"[ERROR] route=chat, status={e.status_code}")
        raise
    except Exception as e:
        async with metrics_lock:
            request_counters["errors"] += 1
        logger.exception(f"[ERROR] route=chat, exception={e!r}")
        raise HTTPException(
            status_code=500,
            detail=str(e) if settings.debug else CHAT_FAILED_TEXT,
        )

    async with metrics_lock:
        request_counters["chat"] += 1
        if response.get("extractedIntent") == INVALID_INTENT_LINE:
            request_counters["invalid"] += 1
    return response


@app.post("/login")
async def login(request: LoginRequest):
    async with metrics_lock:
        request_counters["total"] += 1

    try:
        response = await login_executor.execute(request)
    except HTTPException as e:
        async with metrics_lock:
            request_counters["errors"] += 1
        logger.warning(f"[ERROR] route=login, status={e.status_code}")
        raise
    except Exception as e:
        async with metrics_lock:
            request_counters["errors"] += 1
        logger.exception(f"[ERROR] route=login, exception={e!r}")
        raise HTTPException(status_code=500, detail=LOGIN_FAILED_TEXT)

    async with metrics_lock:
        request_counters["login"] += 1
    return response


# -----------------------------
# Entrypoint
# -----------------------------
import uvicorn

if __name__ == "__main__":
    logger.info(f"API Gateway listening on port {settings.port}")
    uvicorn.run("API_LAYER.app:app", host=settings.host, port=settings.port, workers=1)
