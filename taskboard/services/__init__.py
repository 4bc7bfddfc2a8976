"""Business logic for Taskboard."""
