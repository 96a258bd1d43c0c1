import os

# Basic config
host = os.getenv("HOST", "0.0.0.0")
port = os.getenv("PORT", "5010")
bind = f"{host}:{port}"

# The harbour snapshot lives in process memory, so one worker only
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
keepalive = 120
timeout = int(os.getenv("TIMEOUT", "120"))

# Logging
loglevel = os.getenv("LOG_LEVEL", "info")
errorlog = "-"  # stderr
accesslog = "-"  # stdout
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'
