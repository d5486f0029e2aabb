from fastapi import APIRouter, Depends

from otms_ref_server.errors import Superseded
from otms_ref_server.infra.providers import get_account_loader, get_ledger
from otms_ref_server.models import AccountSnapshot
from otms_ref_server.ports.ledger import LedgerQueryPort
from otms_ref_server.services.account import AccountLoader

router = APIRouter(prefix="/treasuries/{treasury}", tags=["accounts"])


@router.get("/account", response_model=AccountSnapshot)
def get_account(
    treasury: str,
    loader: AccountLoader = Depends(get_account_loader),
    ledger: LedgerQueryPort = Depends(get_ledger),
) -> AccountSnapshot:
    snapshot = loader.load(treasury, ledger)
    if snapshot is None:
        raise Superseded("A newer load of this account replaced this request")
    return snapshot
