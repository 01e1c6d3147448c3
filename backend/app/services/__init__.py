"""Services Layer — the imperative shell around core/ rules.

Invariants:
    - record_store is the only module that issues SQL for drivers/teams
    - consistency_rules is the only module that commits
"""
