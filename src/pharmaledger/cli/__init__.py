"""Command line interface for pharmaledger."""
