from uuid import UUID

from fastapi import Request

from event_checker.config.settings import settings


class LinkBuilder:
    """Builds the public guest link and the private host panel link."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def guest_link(self, event_id: UUID) -> str:
        return f"{self.base_url}/rsvp/{event_id}"

    def host_link(self, event_id: UUID, host_key: str) -> str:
        return f"{self.base_url}/host/{event_id}?key={host_key}"


def base_url_from_request(request: Request) -> str:
    proto = request.headers.get("x-forwarded-proto") or "https"
    host = request.headers.get("x-forwarded-host") or request.headers.get("host", "")
    return f"{proto}://{host}"


def get_link_builder(request: Request) -> LinkBuilder:
    """Dependency: configured base URL wins over the request's own host."""
    return LinkBuilder(settings.base_url or base_url_from_request(request))
