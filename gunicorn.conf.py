"""
Gunicorn configuration for bjjfed production deployment
"""
import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '5000')}"
backlog = 2048

# The dashboard state lives in process memory, so a single worker process
# serves all requests; threads give request concurrency.
workers = 1
worker_class = 'gthread'
threads = int(os.environ.get('GUNICORN_THREADS', '8'))
max_requests = 0
timeout = 120
keepalive = 2

# Logging
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(L)s'

# Process naming
proc_name = 'bjjfed'

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None

# Security
limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190

def on_starting(server):
    """Called just before the master process is initialized."""
    print("Starting bjjfed WSGI server...")

def when_ready(server):
    """Called just after the server is started."""
    print(f"bjjfed is ready. Listening on {bind}")

def on_exit(server):
    """Called just before exiting."""
    print("Shutting down bjjfed...")
