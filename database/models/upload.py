from sqlalchemy import Column, Integer, Text, BigInteger, TIMESTAMP

from .base import Base


class SdsUpload(Base):
    """
    Index entry for a manually uploaded SDS PDF.

    At most one active upload per sds_id; a new upload replaces the row.
    """
    __tablename__ = 'sds_uploads'

    id = Column(Integer, primary_key=True, autoincrement=True)
    sds_id = Column(Text, nullable=False, unique=True, index=True)

    # Server-generated name: sds-{sds_id}-{timestamp}.pdf
    file_name = Column(Text, nullable=False)
    # Display only - never used in paths
    original_name = Column(Text, nullable=False)

    uploaded_at = Column(TIMESTAMP(timezone=True), nullable=False)
    uploaded_by = Column(Text, nullable=False, default="Unknown")
    file_size = Column(BigInteger, nullable=False)
