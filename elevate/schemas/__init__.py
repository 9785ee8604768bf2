"""Pydantic schemas mapping domain fields to wire names."""
