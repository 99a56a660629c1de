import uvicorn
import time
import logging
from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from codeshield.api.analyze_code import router as analyze_code_router
from codeshield.core.config import CORS_ALLOW_ORIGINS, LOG_DIR, LOG_LEVEL
from codeshield.utils.logging_config import setup_logging

setup_logging(level=getattr(logging, LOG_LEVEL, logging.INFO), log_dir=LOG_DIR)
logger = logging.getLogger("main")

app = FastAPI(title="CodeShield AI Security Review API")

# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Incoming: {request.method} {request.url.path} from {client_host}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {e}")
            raise
        process_time = (time.time() - start_time) * 1000
        logger.info(
            f"Outgoing: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.2f}ms"
        )
        return response

app.add_middleware(LoggingMiddleware)

# ---------------------------------------------------------------------------
# CORS: the browser frontend posts snippets from its own origin
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# Health endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok"}

app.include_router(analyze_code_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
