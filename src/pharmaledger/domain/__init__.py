"""Domain layer for pharmaledger.

Services are imported from their modules (``pharmaledger.domain.journal`` and
so on) so that the database layer can import entities without pulling the
services in.
"""
