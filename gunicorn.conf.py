"""
Gunicorn configuration for production deployment
Workers run the ASGI app through uvicorn
"""
import os

# Server socket
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"
backlog = 2048

# Worker processes
# bcrypt hashing runs in each worker's threadpool, so keep the count near the CPU count
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 100

# Worker lifecycle
max_requests = 1000  # Restart worker after 1000 requests
max_requests_jitter = 100  # Stagger restarts

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "placement_auth_api"

# Server mechanics
daemon = False  # Docker/systemd supervises the process
pidfile = None

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting Gunicorn server")


def when_ready(server):
    server.log.info("Gunicorn server is ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker is aborted (usually a request hit the timeout)."""
    worker.log.info("Worker received SIGABRT signal")
