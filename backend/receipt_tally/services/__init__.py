"""
External collaborators (OCR engine).
"""
