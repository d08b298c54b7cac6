"""Complaint persistence."""

from crp.db.store import ComplaintStore, MemoryComplaintStore, PostgresComplaintStore, build_store

__all__ = ["ComplaintStore", "MemoryComplaintStore", "PostgresComplaintStore", "build_store"]
