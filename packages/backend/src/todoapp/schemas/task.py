"""Pydantic schemas for tasks.

Learn: Separate schemas for create/update/read keeps the API clean.
- TaskCreate: what you POST to create a task
- TaskUpdate: what you PUT to modify a task (all optional, partial)
- TaskRead: what the API returns
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TaskCreate(BaseModel):
    title: Optional[str] = None  # required; checked by the service for a 400
    completed: bool = False


class TaskUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""
    title: Optional[str] = None
    completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: uuid.UUID
    title: str
    completed: bool
    owner_id: Optional[uuid.UUID]
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
