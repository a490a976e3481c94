"""Key-value store service with image-aware storage."""
