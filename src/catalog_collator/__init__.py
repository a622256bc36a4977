"""Catalog collator - turns software catalog entities into search documents."""

__version__ = "0.1.0"
