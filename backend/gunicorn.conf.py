import os

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False


def when_ready(server):
    """Seed empty code pools once, in the master, before workers fork."""
    from waitlist import create_app
    from waitlist.cli import seed_code_pools

    app = create_app()
    if not app.config.get("SEED_CODES_ON_STARTUP", False):
        return
    with app.app_context():
        inserted = seed_code_pools()
    server.log.info(
        "code pools seeded: %s",
        ", ".join(f"{pool.value}={count}" for pool, count in inserted.items()),
    )
