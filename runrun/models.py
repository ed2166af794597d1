"""Database models for runrun."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from runrun.database import Base


class UserRole(enum.Enum):
    """User roles for authorization."""

    ADMIN = "admin"
    RUNNER = "runner"


class RunnerStatus(enum.Enum):
    """Runner lifecycle status. Deleting a runner only marks it inactive."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class User(Base):
    """API user with a password login and a short-lived access token."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.RUNNER)
    access_token: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    access_token_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Runner(Base):
    """A runner with cached personal and season best times."""

    __tablename__ = "runners"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[RunnerStatus] = mapped_column(
        Enum(RunnerStatus), default=RunnerStatus.ACTIVE, nullable=False
    )
    # HH:MM:SS text, maintained by services.best_times only
    personal_best: Mapped[str | None] = mapped_column(String(8), nullable=True)
    season_best: Mapped[str | None] = mapped_column(String(8), nullable=True)

    # Relationships
    results: Mapped[list["Result"]] = relationship(back_populates="runner")

    @property
    def is_active(self) -> bool:
        return self.status == RunnerStatus.ACTIVE


class Result(Base):
    """A single race result of a runner."""

    __tablename__ = "results"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    runner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("runners.id"), nullable=False, index=True
    )
    race_result: Mapped[str] = mapped_column(String(8), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    runner: Mapped["Runner"] = relationship(back_populates="results")
