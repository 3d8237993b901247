from sqlalchemy import Column, Integer, Text, Float, TIMESTAMP, JSON, Index, func

from .base import Base


class SdsDatabaseRecord(Base):
    """
    Shared SDS lookup cache.

    One row per successful resolution. Product identity is not unique:
    re-resolving a product appends a new row.
    """
    __tablename__ = 'sds_database'

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_name = Column(Text, nullable=False, index=True)
    manufacturer = Column(Text)

    # Document references
    sds_url = Column(Text)
    sds_source = Column(Text)
    manufacturer_sds_portal = Column(Text)

    # GHS classification, filled in by seeding when known
    signal_word = Column(Text)
    pictogram_codes = Column(JSON, nullable=False, default=list)
    hazard_statements = Column(JSON, nullable=False, default=list)
    cas_numbers = Column(JSON, nullable=False, default=list)
    un_number = Column(Text)
    ghs_categories = Column(JSON, nullable=False, default=list)
    industry_tags = Column(JSON, nullable=False, default=list)

    confidence = Column(Float, nullable=False, default=0.0)  # 0.00-1.00
    lookup_date = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_sds_database_lookup', 'product_name', 'lookup_date'),
    )
