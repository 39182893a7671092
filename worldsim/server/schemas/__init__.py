"""Request and response schemas for the world simulator API."""
