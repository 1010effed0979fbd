from fastapi import APIRouter

from .features.create_event.router import router as create_event_router
from .features.get_event_info.router import router as get_event_info_router
from .features.get_summary.router import router as get_summary_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(create_event_router)
router.include_router(get_event_info_router)
router.include_router(get_summary_router)
router.include_router(submit_rsvp_router)
