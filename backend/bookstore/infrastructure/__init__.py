"""Infrastructure Layer — database access, persistence adapters and logging setup.

Invariants:
    - Infrastructure never imports from api/
    - Every storage failure leaves this layer as PersistenceError
"""
