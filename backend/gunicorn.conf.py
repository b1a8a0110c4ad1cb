# gunicorn.conf.py — Production server configuration.
#
# Run from backend/ with:
#   gunicorn api.main:app -c gunicorn.conf.py
#
# Sessions live in DATABASE_URL, so every worker must point at the same
# database; the SQLite default only works for a single worker.

workers = 4
worker_class = "uvicorn.workers.UvicornWorker"

bind = "0.0.0.0:8000"

# stdout/stderr for the process manager; JSON app logs come from core/logging.py
accesslog = "-"
errorlog  = "-"
loglevel  = "info"

# Upstream calls time out after UPSTREAM_TIMEOUT_SECONDS (15s default);
# a request fans out to a handful of them at most.
timeout          = 90
keepalive        = 5
graceful_timeout = 30
