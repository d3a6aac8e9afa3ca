"""
Collection Models

A collection is an ordered group of resources with its own display settings.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from resource_hub.database import Base
from resource_hub.models.resource import PublishStatus


class Collection(Base):
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(Enum(PublishStatus), default=PublishStatus.PUBLISH, nullable=False)
    display_style = Column(String(20), default="list", nullable=False)
    show_progress = Column(Boolean, default=False, nullable=False)
    progress = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    items = relationship(
        "CollectionItem",
        back_populates="collection",
        cascade="all, delete-orphan",
        order_by="CollectionItem.order",
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, title={self.title})>"


class CollectionItem(Base):
    """Junction table linking resources to a collection with ordering."""

    __tablename__ = "collection_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    collection_id = Column(Integer, ForeignKey("collections.id", ondelete="CASCADE"), nullable=False, index=True)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, default=0, nullable=False)

    collection = relationship("Collection", back_populates="items")
    resource = relationship("Resource")

    __table_args__ = (
        UniqueConstraint("collection_id", "resource_id", name="uq_collection_resource"),
        Index("ix_collection_items_order", "collection_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<CollectionItem(collection={self.collection_id}, resource={self.resource_id}, order={self.order})>"
