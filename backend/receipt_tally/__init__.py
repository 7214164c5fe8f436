"""
receipt-tally: extract product prices from receipt OCR text and total them
across receipts, merging near-duplicate product names.
"""
__version__ = "1.0.0"
