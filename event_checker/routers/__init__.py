from event_checker.routers.healthz.router import router as healthz

__all__ = [
    "healthz",
]
