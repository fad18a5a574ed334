"""Project model."""

from sqlalchemy import JSON, Column, Date, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from projecthub.database import Base
from projecthub.models.enums import ProjectStatus
from projecthub.models.mixins import TimestampMixin


class Project(Base, TimestampMixin):
    """Project owned by a user and shared with its members."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(
        Enum(
            ProjectStatus,
            name="projectstatus",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ProjectStatus.PLANNING,
        nullable=False,
    )
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", backref="owned_projects")
    memberships = relationship(
        "ProjectMember", back_populates="project", cascade="all, delete-orphan"
    )
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")

    @property
    def members(self) -> list[int]:
        """User ids of every member, owner included."""
        return sorted(m.user_id for m in self.memberships)


class ProjectMember(Base, TimestampMixin):
    """Membership of a user in a project."""

    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    project = relationship("Project", back_populates="memberships")
    user = relationship("User", backref="project_memberships")
