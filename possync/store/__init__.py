"""Local mirror package."""
from possync.store.entity_store import EntityStore

__all__ = ['EntityStore']
