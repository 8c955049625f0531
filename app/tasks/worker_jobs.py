from datetime import datetime, timezone

from app.core.config import settings
from app.services.booking_service import complete_finished
from app.storage.base import Store
from app.storage.factory import build_store


def complete_finished_rentals(store: Store | None = None, today: str | None = None) -> dict:
    """Move active rentals whose end date has passed to completed."""
    own_store = store is None
    if own_store:
        store = build_store(settings)
    today = today or datetime.now(timezone.utc).date().isoformat()
    try:
        return {"completed": complete_finished(store, today)}
    finally:
        if own_store:
            store.close()
