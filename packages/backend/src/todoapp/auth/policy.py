"""Task access policy — which tasks a request may see or change.

Learn: All four task routes share this one decision table instead of
each re-deriving it:

    state          list            create          update / delete
    ------------   -------------   -------------   ---------------------------
    NoToken        every task      owner unset     any task
    ValidUser(u)   owner == u      owner = u       owner == u or owner unset
    InvalidToken   every task      owner unset     any task

The permissive rows keep clients that predate authentication working.
Two switches can tighten them without touching the routes:
- unowned_tasks_writable=False stops authenticated users from editing
  unowned tasks.
- reject_invalid_tokens=True makes InvalidToken raise instead of falling
  back to anonymous access.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from todoapp.auth.dependencies import AuthState, InvalidToken, ValidUser
from todoapp.config import settings
from todoapp.errors import InvalidTokenError


@dataclass(frozen=True)
class AccessScope:
    """The slice of the task table an operation is allowed to touch.

    owner_id=None means unrestricted. Otherwise only tasks owned by
    owner_id, plus unowned tasks when include_unowned is set.
    """

    owner_id: Optional[uuid.UUID] = None
    include_unowned: bool = False

    @property
    def unrestricted(self) -> bool:
        return self.owner_id is None


UNRESTRICTED = AccessScope()


class TaskAccessPolicy:
    """Maps an AuthState to an AccessScope per operation kind."""

    def __init__(
        self,
        unowned_tasks_writable: bool = True,
        reject_invalid_tokens: bool = False,
    ):
        self.unowned_tasks_writable = unowned_tasks_writable
        self.reject_invalid_tokens = reject_invalid_tokens

    @classmethod
    def from_settings(cls) -> "TaskAccessPolicy":
        return cls(
            unowned_tasks_writable=settings.unowned_tasks_writable,
            reject_invalid_tokens=settings.reject_invalid_tokens,
        )

    def _user_id(self, state: AuthState) -> Optional[uuid.UUID]:
        """Return the caller's id, or None for anonymous access.

        Raises InvalidTokenError for a bad token when the policy rejects them.
        """
        if isinstance(state, ValidUser):
            return state.user_id
        if isinstance(state, InvalidToken) and self.reject_invalid_tokens:
            raise InvalidTokenError(state.reason)
        return None

    def read_scope(self, state: AuthState) -> AccessScope:
        user_id = self._user_id(state)
        if user_id is None:
            return UNRESTRICTED
        return AccessScope(owner_id=user_id)

    def write_scope(self, state: AuthState) -> AccessScope:
        user_id = self._user_id(state)
        if user_id is None:
            return UNRESTRICTED
        return AccessScope(owner_id=user_id, include_unowned=self.unowned_tasks_writable)

    def owner_for_create(self, state: AuthState) -> Optional[uuid.UUID]:
        return self._user_id(state)
