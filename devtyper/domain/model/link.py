"""Outcomes of linking a GitHub identity to a profile."""

from typing import Annotated, Literal, Union

from pydantic import Field

from devtyper.domain.model.common import DomainModel
from devtyper.domain.model.profile import ExternalIdentity
from devtyper.domain.value import UserId


class Linked(DomainModel):
    """Identity written onto the subject's profile."""

    kind: Literal["linked"] = "linked"
    identity: ExternalIdentity


class AlreadyLinkedSelf(DomainModel):
    """Subject already holds the identity. Nothing was written."""

    kind: Literal["already_linked_self"] = "already_linked_self"
    identity: ExternalIdentity


class AlreadyLinkedElsewhere(DomainModel):
    """Another profile holds the identity. Nothing was written."""

    kind: Literal["already_linked_elsewhere"] = "already_linked_elsewhere"
    existing_user: UserId
    existing_username: str


LinkOutcome = Annotated[
    Union[Linked, AlreadyLinkedSelf, AlreadyLinkedElsewhere],
    Field(discriminator="kind"),
]
