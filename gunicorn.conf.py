# Gunicorn configuration file for the Instagram messaging relay
import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
backlog = 2048

# Worker processes
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 50
preload_app = True

# Outbound Graph calls are bounded by REQUEST_TIMEOUT, keep this above it
timeout = 30
keepalive = 2
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "ig-relay"

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

wsgi_app = "ig_relay.main:app"


# Worker lifecycle
def on_starting(server):
    server.log.info("Starting Instagram messaging relay")


def on_reload(server):
    server.log.info("Reloading Instagram messaging relay")


def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)


def worker_abort(worker):
    worker.log.info("Worker aborted (pid: %s)", worker.pid)
