"""
Gunicorn configuration for Teamspace production deployment.

Usage:
    gunicorn teamspace.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")

# Worker processes: CPU cores * 2 + 1 (Gunicorn recommendation)
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds); covers a slow SMTP handshake during register/invite
timeout = 60

# Keep-alive connections (seconds)
keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = "info"
