"""Gunicorn config for serving the cashflow API."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Every worker loads its own snapshot and polls the record source itself,
# so extra workers multiply fetches. WEB_CONCURRENCY raises the count.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# The first inbox load runs inside the lifespan, before the worker answers
timeout = 60

# Long enough for the lifespan to cancel and await the polling task
graceful_timeout = 30

keepalive = 65

# Store refresh summaries are printed, so stdout carries them next to the access log
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info")
