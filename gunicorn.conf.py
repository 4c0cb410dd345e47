# gunicorn.conf.py
import os

wsgi_app = "device_console.main:create_app()"

# Nombre de workers
workers = int(os.environ.get("WEB_CONCURRENCY", 2))
worker_class = "uvicorn.workers.UvicornWorker"
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

timeout = 120
keepalive = 5

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Worker temp directory (pour éviter les problèmes de droits)
worker_tmp_dir = '/dev/shm'

# Max requests pour éviter les fuites mémoire
max_requests = 1000
max_requests_jitter = 50
