import logging

from app.tasks.celery_app import celery
from app.tasks import worker_jobs

logger = logging.getLogger(__name__)


@celery.task(name="app.tasks.jobs.complete_finished_rentals")
def complete_finished_rentals():
    result = worker_jobs.complete_finished_rentals()
    logger.info("completion job: %s", result)
    return result
