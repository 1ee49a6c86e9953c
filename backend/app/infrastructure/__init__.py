"""Infrastructure Layer — filesystem storage, backups, and logging.

Invariants:
    - All OSError / parse failures mapped to StorageError (core/errors.py)
    - Blocking filesystem calls run off the event loop (asyncio.to_thread)

Design Decisions:
    - Implements the Protocols in core/repository_protocols.py; core never imports this package
"""
