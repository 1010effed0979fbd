"""Request/response bodies for RSVP submission."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class RSVPSubmitRequest(BaseModel):
    """RSVP form body.

    Fields are untyped: the write model checks them in a fixed order so a
    filled ``honeypot`` wins over any other problem, wrong JSON types included.
    """

    name: Any = None
    phone: Any = None
    email: Any = None
    status: Any = None
    total_people: Any = None
    children: Any = None
    honeypot: Any = ""


class RSVPSubmitResponse(BaseModel):
    ok: bool = True
    rsvp_id: UUID
    status: str
    adults: int
    edit_until: datetime | None = None
    message: str
