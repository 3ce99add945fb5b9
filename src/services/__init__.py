"""Provider adapters and storage."""
