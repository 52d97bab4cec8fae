"""
Core infrastructure shared by every entity: configuration, logging,
typed errors, field validators and the in-memory record store.
"""
