"""
Person record store: schema, validation and CRUD for person records.
"""

__version__ = "0.1.0"
