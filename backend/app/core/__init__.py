"""Core Layer — pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: validation, id allocation,
      and queries are plain functions over an in-memory record set
"""
