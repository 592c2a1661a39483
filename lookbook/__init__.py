"""lookbook: a vendor's photographed inventory rack."""

__version__ = "1.0.0"
