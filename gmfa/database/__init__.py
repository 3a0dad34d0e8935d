"""Plain-text secrets file storage."""
