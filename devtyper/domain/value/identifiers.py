"""Strongly typed identifiers for DevTyper domain entities."""

from typing import NewType
from uuid import UUID

# The hosted auth service owns user ids; profiles share them
UserId = NewType("UserId", UUID)
AttemptId = NewType("AttemptId", UUID)
SnippetId = NewType("SnippetId", UUID)
