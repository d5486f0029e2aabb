# src/otms_ref_server/main.py
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from otms_ref_server import __version__
from otms_ref_server.config import settings
from otms_ref_server.errors import OTMSException
from otms_ref_server.logging_setup import configure_logging
from otms_ref_server.api.accounts import router as accounts_router
from otms_ref_server.api.annotations import router as annotations_router
from otms_ref_server.api.discovery import router as discovery_router
from otms_ref_server.api.health import router as health_router
from otms_ref_server.api.proofs import router as proofs_router
from otms_ref_server.api.errors import (
    http_exception_handler,
    otms_exception_handler,
    request_validation_exception_handler,
)

# Load env vars
from dotenv import load_dotenv
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="OpenTreasury OTMS Proof Server",
    description="Categorize treasury transactions, publish an OTMS summary, anchor its SHA-256 on-chain and verify it.",
    version=__version__,
)

app.include_router(health_router)
app.include_router(discovery_router)
app.include_router(annotations_router)
app.include_router(proofs_router)
app.include_router(accounts_router)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(OTMSException, otms_exception_handler)


@app.get("/")
def root():
    return {"status": "OTMS proof server running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "otms_ref_server.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
