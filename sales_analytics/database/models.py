"""
Database Models

A single table of product-sale records. Rows keep an autoincrement surrogate
key so "natural order" means insertion order, as in the source dataset.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


class ProductSale(Base):
    """
    Product Sale Table

    One row per catalog entry with its price, category, sold flag and the
    instant it was sold.
    """
    __tablename__ = "product_sales"

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    image: Mapped[str] = mapped_column(String(1000), nullable=False, default="")

    # Float renders as shortest text ("19", "329.85") when cast for search
    price: Mapped[float] = mapped_column(Float, nullable=False)
    sold: Mapped[bool] = mapped_column(Boolean, nullable=False)
    date_of_sale: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_product_sales_date", "date_of_sale"),
        Index("idx_product_sales_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<ProductSale(id={self.id}, title={self.title!r})>"
