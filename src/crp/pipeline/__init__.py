"""Complaint resolution pipeline."""

from crp.pipeline.ids import generate_complaint_id
from crp.pipeline.orchestrator import Resolver, build_resolver

__all__ = ["Resolver", "build_resolver", "generate_complaint_id"]
