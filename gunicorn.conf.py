"""Gunicorn configuration for Ignition production deployment."""

import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('APP_PORT', '3000')}"

# Worker processes
# Formula: (2 x CPU cores) + 1
workers = int(os.environ.get("GUNICORN_WORKERS", (2 * multiprocessing.cpu_count()) + 1))
threads = int(os.environ.get("GUNICORN_THREADS", 4))
worker_class = "gthread"

# Timeouts
timeout = 60  # SQLite connection checks run inside the request
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = os.environ.get("GUNICORN_ACCESS_LOG", "-")
errorlog = os.environ.get("GUNICORN_ERROR_LOG", "-")
loglevel = os.environ.get("LOG_LEVEL", "info").lower()

# Process naming
proc_name = "ignition"

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190

# Each worker starts its own event thread after forking
preload_app = False
