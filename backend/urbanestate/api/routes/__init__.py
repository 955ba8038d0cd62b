"""API Routes — one router per resource, mounted under /api/v1."""
