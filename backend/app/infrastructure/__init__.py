"""Infrastructure Layer — database engine management and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage faults are mapped to DatabaseError, never swallowed or retried
"""
