"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes delegate persistence to repositories; no SQL in route modules
"""
