import multiprocessing
import os

# Server configuration
bind = f"{os.getenv('APP_HOST', '0.0.0.0')}:{os.getenv('APP_PORT', '8000')}"
workers = max(1, multiprocessing.cpu_count())
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 1000
max_requests_jitter = 100

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Timeouts (uploads are capped at 5MB)
timeout = 60
graceful_timeout = 30

# Process naming
proc_name = "maintenance-desk-api"

# Environment
raw_env = [
    "PYTHONUNBUFFERED=1",
]
