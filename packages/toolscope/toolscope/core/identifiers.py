"""Core identifier types for toolscope."""

from __future__ import annotations

import uuid
from typing import NewType

InstanceId = NewType("InstanceId", str)


def generate_id() -> str:
    """Generate a unique identifier (UUID4)."""
    return str(uuid.uuid4())


def generate_instance_id() -> InstanceId:
    """Generate a new InstanceId."""
    return InstanceId(generate_id())
