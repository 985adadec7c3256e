"""Object-store access layer.

This module locates, fetches, and decodes exported ledger batches.
It powers single-ledger reads, range checks, and latest-ledger lookup.
"""
