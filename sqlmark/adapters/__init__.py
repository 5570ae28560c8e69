"""Database adapters for sqlmark."""
