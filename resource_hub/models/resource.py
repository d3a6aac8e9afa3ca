import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from resource_hub.database import Base
from resource_hub.models.taxonomy import resource_terms


class PublishStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISH = "publish"


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), index=True, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    excerpt = Column(Text, nullable=True)
    body = Column(Text, nullable=False, default="")
    status = Column(Enum(PublishStatus), default=PublishStatus.PUBLISH, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    thumbnail_url = Column(String(500), nullable=True)
    menu_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    meta = relationship("ResourceMeta", back_populates="resource", cascade="all, delete-orphan")
    terms = relationship("Term", secondary=resource_terms, back_populates="resources")

    __table_args__ = (Index("idx_resources_status", "status"),)

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, slug={self.slug})>"


class ResourceMeta(Base):
    """One type-specific metadata value, stored as JSON so numbers and flags keep their type."""

    __tablename__ = "resource_meta"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=False, index=True)
    meta_key = Column(String(100), nullable=False)
    meta_value = Column(JSON, nullable=True)

    resource = relationship("Resource", back_populates="meta")

    __table_args__ = (UniqueConstraint("resource_id", "meta_key", name="uq_resource_meta_key"),)

    def __repr__(self) -> str:
        return f"<ResourceMeta(resource={self.resource_id}, key={self.meta_key})>"
