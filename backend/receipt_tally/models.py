"""
Pydantic models for the batch report (output boundary).
"""
from pydantic import BaseModel, Field
from typing import List
from decimal import Decimal


class ProductTotal(BaseModel):
    """One aggregated product row."""
    name: str
    total: Decimal
    record_count: int = 0
    variants: List[str] = Field(default_factory=list)


class ImageFailure(BaseModel):
    """An image that was skipped because OCR failed."""
    path: str
    error: str


class AnalysisReport(BaseModel):
    """Result of one batch run."""
    products: List[ProductTotal] = Field(default_factory=list)
    grand_total: Decimal = Decimal("0")
    product_count: int = 0
    images_processed: int = 0
    failures: List[ImageFailure] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "products": [
                    {"name": "pommes", "total": "2.50", "record_count": 1, "variants": ["pommes"]},
                    {"name": "cheeseburger", "total": "1.19", "record_count": 1, "variants": ["cheeseburger"]}
                ],
                "grand_total": "3.69",
                "product_count": 2,
                "images_processed": 1,
                "failures": []
            }
        }
