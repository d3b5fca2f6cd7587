#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Uses the local SQLite database unless DATABASE_URL points elsewhere; tables
are created on startup for local SQLite.
"""
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting BeautiBook API at http://localhost:{port} (docs at /docs)")

    uvicorn.run("beautibook.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
