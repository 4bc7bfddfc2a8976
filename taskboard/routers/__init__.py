"""API routers for Taskboard."""
