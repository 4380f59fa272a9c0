# gunicorn.conf.py
import multiprocessing
import os

from SISFO.app_logger import build_logging_config

# app factory; the package is installed (pip install -e .) so no PYTHONPATH tweak is needed
wsgi_app = "SISFO.main:create_app"
factory = True

# networking
host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("HTTP_PORT", os.getenv("PORT", "8080")))
bind = f"{host}:{port}"

# workers
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_tmp_dir = "/dev/shm"
# each worker builds its own engine and event consumer on its own loop
preload_app = False

# timeouts
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
capture_output = True
logconfig_dict = build_logging_config(os.getenv("LOG_LEVEL", "INFO").upper())

limit_request_field_size = 8190
limit_request_line = 4094

max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("GUNICORN_MAX_REQUESTS_JITTER", "100"))
