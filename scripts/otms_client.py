#!/usr/bin/env python3
"""
Talk to a running OTMS proof server.

Usage:
  # 1) one-time generator for the server-side signing key
  python scripts/otms_client.py gen-key

  # 2) generate a proof for a treasury, then anchor it
  python scripts/otms_client.py proof --treasury <TREASURY>
  python scripts/otms_client.py proof --treasury <TREASURY> --anchor

  # 3) verify a published document against an anchor transaction
  python scripts/otms_client.py verify --tx <SIGNATURE> --file opentreasury-otms-XXXXXX.json
"""
import os, sys, json, base64, argparse
import requests
from nacl.signing import SigningKey

B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

def b64u(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).decode().rstrip("=")

def b58(b: bytes) -> str:
    num = int.from_bytes(b, "big")
    out = ""
    while num > 0:
        num, rem = divmod(num, 58)
        out = B58_ALPHABET[rem] + out
    pad = len(b) - len(b.lstrip(b"\x00"))
    return "1" * pad + out

def gen_key():
    seed = os.urandom(32)
    sk = SigningKey(seed)
    print("# Add this to the server env (KEEP PRIVATE):")
    print(f"export OTMS_SIGNER_SEED={b64u(seed)}")
    print("# Fee payer address (fund it before anchoring):")
    print(f"# {b58(bytes(sk.verify_key))}")

def show(r: requests.Response) -> int:
    print("Status:", r.status_code)
    try:
        print(json.dumps(r.json(), indent=2, ensure_ascii=False))
    except ValueError:
        print(r.text)
    return 0 if r.ok else 1

def proof(base: str, treasury: str, do_anchor: bool, timeout: float) -> int:
    r = requests.post(f"{base}/treasuries/{treasury}/proof", timeout=timeout)
    rc = show(r)
    if rc or not do_anchor:
        return rc
    # anchoring waits for confirmation server-side
    r = requests.post(f"{base}/treasuries/{treasury}/proof/anchor", timeout=max(timeout, 90))
    return show(r)

def verify(base: str, tx: str, path: str, timeout: float) -> int:
    with open(path, "r", encoding="utf-8") as fh:
        text = fh.read()
    r = requests.post(
        f"{base}/proofs/verify",
        json={"transaction_id": tx, "document_json": text},
        timeout=timeout,
    )
    rc = show(r)
    if rc:
        return rc
    return 0 if r.json().get("status") == "verified" else 3

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", default=os.getenv("OTMS_HOST", "http://127.0.0.1:8080"))
    ap.add_argument("--timeout", type=float, default=10.0)
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("gen-key")

    p = sub.add_parser("proof")
    p.add_argument("--treasury", required=True)
    p.add_argument("--anchor", action="store_true")

    v = sub.add_parser("verify")
    v.add_argument("--tx", required=True)
    v.add_argument("--file", required=True)

    args = ap.parse_args()
    base = args.host.rstrip("/")

    if args.command == "gen-key":
        gen_key()
        return 0
    if args.command == "proof":
        return proof(base, args.treasury.strip(), args.anchor, args.timeout)
    return verify(base, args.tx.strip(), args.file, args.timeout)

if __name__ == "__main__":
    raise SystemExit(main())
