# Bind & workers
bind = "0.0.0.0:8000"
wsgi_app = "userlist:create_app()"
workers = 1  # the user store lives in process memory
threads = 4
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr
accesslog = "-"
errorlog = "-"
loglevel = "info"  # override with env LOG_LEVEL

forwarded_allow_ips = "*"
proxy_protocol = False
