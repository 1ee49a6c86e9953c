"""Services Layer — mutation pipeline, read queries, and error reporting.

Invariants:
    - Services return Outcome values; exceptions stop at this boundary
    - Every failure is logged once, by the error reporter

Design Decisions:
    - Write side and read side in separate modules: only writes need the lock
"""
