"""F1Sim Application Package — driver and team management service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
