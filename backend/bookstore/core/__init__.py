"""Core Layer — domain rules, error taxonomy and persistence contracts.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or db/
    - No IO at import time; validation helpers are pure and deterministic
"""
