"""Database package: models, session management and stores."""
from second_thought.db.models import CoolDownRow, InterventionRow, UserProfileRow
from second_thought.db.sessions import create_db_engine, get_session, init_db
from second_thought.db.store import (CoolDownStore, InterventionStore,
                                     SqlCoolDownStore, SqlInterventionStore,
                                     SqlUserProfileStore, UserProfileStore)

__all__ = [
    "CoolDownRow",
    "CoolDownStore",
    "InterventionRow",
    "InterventionStore",
    "SqlCoolDownStore",
    "SqlInterventionStore",
    "SqlUserProfileStore",
    "UserProfileRow",
    "UserProfileStore",
    "create_db_engine",
    "get_session",
    "init_db",
]
