"""Shared library code for lbcert."""
