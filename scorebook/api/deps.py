"""
Shared FastAPI dependencies
"""
import threading
from typing import Optional

from scorebook.database import init_db
from scorebook.repository import SqlRepository
from scorebook.store import Scorebook

_scorebook: Optional[Scorebook] = None
_scorebook_lock = threading.Lock()


def get_scorebook() -> Scorebook:
    """The process-wide scorebook, loaded from the database on first use"""
    global _scorebook
    if _scorebook is None:
        with _scorebook_lock:
            if _scorebook is None:
                init_db()
                _scorebook = Scorebook(SqlRepository())
    return _scorebook
