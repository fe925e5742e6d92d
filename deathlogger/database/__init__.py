"""
Storage for recorded deaths: the bounded record store and its state file.
"""

from .store import DeathRecordStore
from .state import PersistedState, StateFileError, load_state, save_state

__all__ = [
    "DeathRecordStore",
    "PersistedState",
    "StateFileError",
    "load_state",
    "save_state",
]
