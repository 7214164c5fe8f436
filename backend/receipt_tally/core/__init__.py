"""
Batch orchestration.
"""
from .bulk_processor import (
    BulkProcessor, DirectoryUnreadable, iter_receipt_images, process_receipt_directory,
)

__all__ = [
    "BulkProcessor", "DirectoryUnreadable", "iter_receipt_images", "process_receipt_directory",
]
