#!/usr/bin/env python3
# backend/run_celery_worker.py
"""
Development Celery worker runner.

Consumes the maintenance queue (expired hold cleanup). Pass --beat to embed
the beat scheduler in the same process.
"""
import os
from pathlib import Path
import subprocess
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

if __name__ == "__main__":
    queues = os.getenv("CELERY_QUEUES") or "maintenance,celery"
    print(f"Starting Celery worker, consuming queues: {queues}")

    cmd = [
        sys.executable,
        "-m",
        "celery",
        "-A",
        "beautibook.tasks.celery_app",
        "worker",
        "--loglevel=info",
        "--concurrency=2",
        "-Q",
        queues,
    ]
    if "--beat" in sys.argv[1:]:
        cmd.append("--beat")

    subprocess.run(cmd)
