"""Domain modules for the catalog collator."""
