"""Pydantic schemas for response bodies."""
