"""
Ownership authorizer.

owns() is true iff the row exists, is active and belongs to the user. Callers
turn a False into NotFound, never Forbidden, so other users' rows stay invisible.
"""
from typing import Iterable, Optional, Type

from sqlalchemy.orm import Session

from backend.app.db.base import Base


class OwnershipAuthorizer:
    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, model: Type[Base], user_id: int):
        return self.db.query(model).filter(model.user_id == user_id, model.is_active.is_(True))

    def fetch_owned(self, model: Type[Base], resource_id: int, user_id: int, lock: bool = False) -> Optional[Base]:
        """
        Load an owned, active row or None.

        lock=True takes a row lock (SELECT ... FOR UPDATE) so the check and the
        mutation that follows it see the same row.
        """
        query = self._scoped(model, user_id).filter(model.id == resource_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def owns(self, model: Type[Base], resource_id: int, user_id: int, lock: bool = False) -> bool:
        return self.fetch_owned(model, resource_id, user_id, lock=lock) is not None

    def owns_all(self, model: Type[Base], ids: Iterable[int], user_id: int, lock: bool = False) -> bool:
        """
        True iff every id is independently owned. An empty list is vacuously owned.

        lock=True takes shared row locks so the referenced rows cannot be
        deactivated before the caller's write commits.
        """
        wanted = set(ids)
        if not wanted:
            return True
        query = self._scoped(model, user_id).filter(model.id.in_(wanted)).with_entities(model.id)
        if lock:
            query = query.with_for_update(read=True)
        found = {row_id for (row_id,) in query.all()}
        return found == wanted
