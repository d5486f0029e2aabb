from fastapi import APIRouter

from otms_ref_server import __version__

router = APIRouter(tags=["system"])


@router.get("/health")
def health():
    return {"status": "ok", "version": __version__}
