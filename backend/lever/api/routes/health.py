from fastapi import APIRouter

from lever.models.events import EventType

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": "0.1.0",
        "event_types": [t.value for t in EventType],
    }
