"""Session Tracker Package — focus session log with local and remote persistence.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
