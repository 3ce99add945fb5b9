"""Server startup - imports the roastreel app and serves it with uvicorn."""
import os
import sys
import traceback

port = int(os.environ.get("PORT", "8000"))
host = os.environ.get("HOST", "0.0.0.0")

try:
    from src.api.server import app
    print("[start.py] roastreel app imported", flush=True)
except Exception as e:
    print(f"[start.py] IMPORT FAILED: {type(e).__name__}: {e}\n{traceback.format_exc()}", flush=True)
    sys.exit(1)

import uvicorn

print(f"[start.py] Starting on {host}:{port}", flush=True)
uvicorn.run(app, host=host, port=port, log_level=os.environ.get("LOG_LEVEL", "info").lower())
