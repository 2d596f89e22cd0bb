"""Counter rows backing generated student and faculty identifiers."""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from ..core.database import Base


class IdentifierSequence(Base):
    """Last issued sequence number for one (scope, bucket) pair."""

    __tablename__ = "identifier_sequences"
    __table_args__ = (
        UniqueConstraint("scope", "bucket", name="identifier_sequences_scope_bucket_unique"),
    )

    sequence_id = Column(Integer, primary_key=True, autoincrement=True)
    scope = Column(String(20), nullable=False)
    bucket = Column(String(100), nullable=False)
    last_value = Column(Integer, nullable=False, default=0)
