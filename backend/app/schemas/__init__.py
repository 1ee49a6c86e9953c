"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate shape and types at the system boundary
    - Field constraints live in core/validate_fields, not here

Design Decisions:
    - Separate from core/domain_types: schemas are API contracts, Student is the stored record
"""
