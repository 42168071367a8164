"""Command line interface for lbcert."""
