"""
Taxonomy Models

Three taxonomies classify resources: type (drives which metadata applies),
topic (hierarchical) and audience.
"""

import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from resource_hub.database import Base


class Taxonomy(str, enum.Enum):
    TYPE = "resource_type"
    TOPIC = "resource_topic"
    AUDIENCE = "resource_audience"


resource_terms = Table(
    "resource_terms",
    Base.metadata,
    Column("resource_id", Integer, ForeignKey("resources.id", ondelete="CASCADE"), primary_key=True),
    Column("term_id", Integer, ForeignKey("terms.id", ondelete="CASCADE"), primary_key=True),
)


class Term(Base):
    __tablename__ = "terms"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    taxonomy = Column(Enum(Taxonomy), nullable=False, index=True)
    slug = Column(String(200), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    parent_id = Column(Integer, ForeignKey("terms.id", ondelete="SET NULL"), nullable=True)
    icon = Column(String(100), nullable=True)

    resources = relationship("Resource", secondary=resource_terms, back_populates="terms")

    __table_args__ = (UniqueConstraint("taxonomy", "slug", name="uq_term_taxonomy_slug"),)

    def __repr__(self) -> str:
        return f"<Term(taxonomy={self.taxonomy}, slug={self.slug})>"
