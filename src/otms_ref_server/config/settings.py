import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if present
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# --- Core Server Config ---
SERVER_HOST = os.getenv("OTMS_SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("OTMS_SERVER_PORT", 8080))
DEBUG = os.getenv("OTMS_DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("OTMS_LOG_LEVEL", "INFO")

# --- Ledger ---
CLUSTER = os.getenv("OTMS_CLUSTER", "devnet")
RPC_URL = os.getenv("OTMS_RPC_URL", "https://api.devnet.solana.com")
COMMITMENT = os.getenv("OTMS_COMMITMENT", "confirmed")  # processed | confirmed | finalized
RPC_TIMEOUT_S = float(os.getenv("OTMS_RPC_TIMEOUT_S", 10))
HISTORY_LIMIT = int(os.getenv("OTMS_HISTORY_LIMIT", 50))

# --- Anchoring ---
CONFIRM_TIMEOUT_S = float(os.getenv("OTMS_CONFIRM_TIMEOUT_S", 60))
CONFIRM_POLL_S = float(os.getenv("OTMS_CONFIRM_POLL_S", 1.0))
# base64url Ed25519 seed; unset means no server-side signer
SIGNER_SEED = os.getenv("OTMS_SIGNER_SEED", "")

# --- View ---
VIEW_MODE = os.getenv("OTMS_VIEW_MODE", "interactive")  # interactive | read-only

# --- Storage ---
ANNOTATIONS_BACKEND = os.getenv("OTMS_ANNOTATIONS", "memory")  # memory | file
DATA_DIR = Path(os.getenv("OTMS_DATA_DIR", str(BASE_DIR / "data")))


def explorer_tx_url(signature: str, cluster: str = CLUSTER) -> str:
    return f"https://explorer.solana.com/tx/{signature}?cluster={cluster}"
