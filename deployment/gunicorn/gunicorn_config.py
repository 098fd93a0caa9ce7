import os

bind = os.getenv("GUNICORN_BIND", "unix:/run/contact-form/gunicorn.sock")
# The contact form rate limiter counts per process; more workers loosen the effective limit
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
timeout = 60
keepalive = 5

wsgi_app = "core.wsgi:application"

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "contact-form"

# Server mechanics
daemon = False
umask = 0o007


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting contact form service")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Contact form service is ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal."""
    worker.log.info("Worker received SIGABRT signal")
