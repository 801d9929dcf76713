"""
Gunicorn Configuration for Production

Run with: gunicorn main:app -c gunicorn.conf.py

Calculation history and compiled patterns live in process memory, so each
worker keeps its own copy. Voice sessions are long-lived WebSockets bound
to the worker that accepted them.
"""

import multiprocessing
import os

# =============================================================================
# Server Socket
# =============================================================================

bind = os.getenv("BIND", "0.0.0.0:8000")
backlog = 2048

# =============================================================================
# Worker Processes
# =============================================================================

# One worker keeps a single shared history; raise it for throughput
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
if workers < 1:
    workers = min(2 * multiprocessing.cpu_count() + 1, 4)

# Use Uvicorn worker for async support
worker_class = "uvicorn.workers.UvicornWorker"

# Voice sessions idle between utterances
timeout = 60
graceful_timeout = 30
keepalive = 5

max_requests = 2000
max_requests_jitter = 200

# =============================================================================
# Logging
# =============================================================================

accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = os.getenv("LOG_LEVEL", "info")

access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = "voicecalc-api"
