"""Complaint routing pipeline: civic complaint triage for Delhi Reddit posts."""

__version__ = "0.1.0"
