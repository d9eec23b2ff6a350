"""
LavaJato Gestão — Gunicorn production configuration.

Usage:
    gunicorn -c deploy/gunicorn.conf.py 'src.app:create_app()'

GUNICORN_BIND and LOG_LEVEL are read from the process environment.
"""

import multiprocessing
import os

# Loopback by default; put a reverse proxy in front for TLS
bind = os.getenv("GUNICORN_BIND", "127.0.0.1:5000")
backlog = 256

# One SQLite file shared by every worker; WAL allows a single writer at a time
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)
worker_class = "sync"
timeout = 60
keepalive = 5

# Request log with response time in microseconds (%(D)s)
accesslog = "/var/log/lavajato/access.log"
errorlog = "/var/log/lavajato/error.log"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

proc_name = "lavajato"

# Stay in the foreground for the process supervisor
daemon = False
pidfile = "/run/lavajato/lavajato.pid"
umask = 0o022

# create_app() applies pending schema migrations; do it once, before fork
preload_app = True

# Recycle workers periodically, staggered so they do not all restart together
max_requests = 1000
max_requests_jitter = 50
