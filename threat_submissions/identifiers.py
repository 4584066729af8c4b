"""Message identifier resolution with provenance tagging.

A submission without an ``internetMessageId`` gets one of two fallbacks:
an identifier recovered from the recipient's mailbox, or a synthetic
composite key.  The provenance marker on the canonical string tells
downstream consumers which one they are looking at.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from .models import RawSubmission

logger = structlog.get_logger()

RECOVERED_PREFIX = "RETRIEVED: "
SYNTHETIC_PREFIX = "ALT-ID: "


class IdentifierProvenance(str, Enum):
    """How a message identifier was obtained."""

    AUTHORITATIVE = "Authoritative"
    RECOVERED = "Recovered"
    SYNTHETIC = "Synthetic"


@dataclass(frozen=True)
class ResolvedIdentifier:
    """A message identifier tagged with exactly one provenance kind."""

    provenance: IdentifierProvenance
    value: str

    @classmethod
    def authoritative(cls, value: str) -> ResolvedIdentifier:
        return cls(IdentifierProvenance.AUTHORITATIVE, value)

    @classmethod
    def recovered(cls, value: str) -> ResolvedIdentifier:
        return cls(IdentifierProvenance.RECOVERED, value)

    @classmethod
    def synthetic(cls, value: str) -> ResolvedIdentifier:
        return cls(IdentifierProvenance.SYNTHETIC, value)

    @property
    def canonical(self) -> str:
        """String form written to exports."""
        if self.provenance is IdentifierProvenance.RECOVERED:
            return f"{RECOVERED_PREFIX}{self.value}"
        if self.provenance is IdentifierProvenance.SYNTHETIC:
            return f"{SYNTHETIC_PREFIX}{self.value}"
        return self.value


class MessageIdLookup(Protocol):
    def lookup(
        self,
        mailbox_owner: str,
        counterparty_address: str,
        subject: str,
        anchor_timestamp: str,
    ) -> str | None: ...


def _field(raw: RawSubmission, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


class IdentifierResolver:
    """Assign a provenance-tagged identifier to a raw submission.

    Rules are evaluated in order, first match wins:

    1. ``internetMessageId`` present: authoritative.
    2. Recipient, sender and subject present: look the message up in the
       recipient's mailbox; recovered on a hit, otherwise a synthetic key of
       ``sender-subject-receivedDateTime``.
    3. Otherwise a synthetic key of ``id-createdDateTime``.
    """

    def __init__(self, lookup: MessageIdLookup) -> None:
        self._lookup = lookup

    def resolve(self, submission: RawSubmission) -> ResolvedIdentifier:
        message_id = _field(submission, "internetMessageId")
        if message_id:
            return ResolvedIdentifier.authoritative(message_id)

        recipient = _field(submission, "recipientEmailAddress")
        sender = _field(submission, "senderEmailAddress")
        subject = _field(submission, "subject")
        received = _field(submission, "receivedDateTime")

        if recipient and sender and subject:
            # receivedDateTime is occasionally absent; the submission time is
            # the closest stand-in for the lookup window anchor
            anchor = received or _field(submission, "createdDateTime")
            found = self._lookup.lookup(recipient, sender, subject, anchor)
            if found:
                logger.debug(
                    "message_id_recovered",
                    submission_id=submission.get("id"),
                    internet_message_id=found,
                )
                return ResolvedIdentifier.recovered(found)
            return ResolvedIdentifier.synthetic(f"{sender}-{subject}-{received}")

        submission_id = _field(submission, "id")
        created = _field(submission, "createdDateTime")
        return ResolvedIdentifier.synthetic(f"{submission_id}-{created}")
