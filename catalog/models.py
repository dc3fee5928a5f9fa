from typing import Optional

from sqlmodel import SQLModel, Field


class ProductBase(SQLModel):
    category: str = Field(nullable=False)
    product_name: str = Field(nullable=False)
    product_spec: str = Field(nullable=False)
    # Kept as text, the catalog never does arithmetic on it
    price: str = Field(nullable=False)


class Product(ProductBase, table=True):
    # Ids are never handed out twice, even after the newest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)


class ProductWrite(SQLModel):
    """Body of create and update requests, always the full record.

    Rows already stored are not re-checked.
    """

    category: str = Field(min_length=2)
    product_name: str = Field(min_length=10)
    product_spec: str = Field(min_length=10)
    price: str = Field(min_length=2)

