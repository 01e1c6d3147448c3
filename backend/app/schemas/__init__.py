"""Pydantic Schemas — request/response shapes for API endpoints.

Invariants:
    - Request schemas parse types only; field rules are enforced by services/consistency_rules.py
    - Response schemas read ORM objects via from_attributes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
