"""
Solar Site Layouts - site ingestion and frame layout engine.
"""
__version__ = "0.1.0"
