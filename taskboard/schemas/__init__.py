"""Pydantic schemas for Taskboard."""
