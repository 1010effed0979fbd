import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_checker.config.settings import settings
from event_checker.config.table_names import TableNames
from event_checker.events.dtos import RSVPStatus
from event_checker.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    # Host panel secret, issued once at creation
    host_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    host_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    time: Mapped[datetime.time] = mapped_column(Time, nullable=False)
    tz: Mapped[str] = mapped_column(
        String(64), nullable=False, default=settings.default_timezone_label
    )
    location: Mapped[str] = mapped_column(String(500), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Resolved at creation, never recomputed
    rsvp_deadline: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    include_maybe_in_counts: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ask_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Theming
    color_primary: Mapped[str | None] = mapped_column(String(32), nullable=True)
    color_secondary: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Custom message templates
    msg_thanks_going: Mapped[str | None] = mapped_column(Text, nullable=True)
    msg_thanks_maybe: Mapped[str | None] = mapped_column(Text, nullable=True)
    msg_thanks_not_going: Mapped[str | None] = mapped_column(Text, nullable=True)
    msg_push_24h_going: Mapped[str | None] = mapped_column(Text, nullable=True)
    msg_push_24h_maybe: Mapped[str | None] = mapped_column(Text, nullable=True)

    responses: Mapped[list["RSVPResponse"]] = relationship(
        "RSVPResponse", back_populates="event", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.date} {self.time}>"


class RSVPResponse(Base, TimeStamp):
    __tablename__ = TableNames.RSVP_RESPONSES.value
    __table_args__ = (
        UniqueConstraint("event_id", "name_norm", "phone", name="uq_rsvp_identity"),
        CheckConstraint("total_people >= 1", name="ck_rsvp_total_people_positive"),
        CheckConstraint(
            "children >= 0 AND children <= total_people", name="ck_rsvp_children_range"
        ),
    )

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event: Mapped["Event"] = relationship("Event", back_populates="responses")

    name_raw: Mapped[str] = mapped_column(String(255), nullable=False)
    name_norm: Mapped[str] = mapped_column(String(255), nullable=False)
    # Digits only
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        Enum(
            RSVPStatus,
            name="rsvp_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    total_people: Mapped[int] = mapped_column(Integer, nullable=False)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def adults(self) -> int:
        return self.total_people - self.children

    def __repr__(self) -> str:
        return f"<RSVPResponse {self.name_norm} - {self.status}>"
