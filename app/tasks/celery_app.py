from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from celery import Celery
from celery.signals import worker_ready

from app.core.config import settings

COMPLETION_INTERVAL_S = 3600.0


def _redis_url_for_celery(url: str) -> str:
    """rediss:// brokers need an explicit ssl_cert_reqs query parameter."""
    if not url or urlparse(url.strip()).scheme.lower() != "rediss":
        return url
    parsed = urlparse(url)
    qs = parse_qs(parsed.query)
    if "ssl_cert_reqs" in qs:
        return url
    qs["ssl_cert_reqs"] = ["CERT_NONE"]
    return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))


_broker = _redis_url_for_celery(settings.REDIS_URL)

celery = Celery("carrental", broker=_broker, backend=_broker, include=["app.tasks.jobs"])
celery.conf.update(
    timezone="UTC",
    task_acks_late=True,
    result_expires=COMPLETION_INTERVAL_S * 24,
    beat_schedule={
        "complete-finished-rentals-hourly": {
            "task": "app.tasks.jobs.complete_finished_rentals",
            "schedule": COMPLETION_INTERVAL_S,
        },
    },
)


# Catch up on rentals that ended while no worker was running
@worker_ready.connect
def on_worker_ready(sender, **kwargs):
    from app.tasks.jobs import complete_finished_rentals
    complete_finished_rentals.delay()
