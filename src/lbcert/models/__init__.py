"""Pydantic models for lbcert."""
