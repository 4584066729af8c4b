"""Data models for threat submissions and the canonical export record."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

# A submission exactly as returned by the emailThreats list endpoint.
RawSubmission = dict[str, Any]


class SubmissionCategory(str, Enum):
    """Category a reporter assigned to a submission."""

    NOT_JUNK = "notJunk"
    SPAM = "spam"
    PHISHING = "phishing"
    MALWARE = "malware"


class SubmissionSource(str, Enum):
    """Who made the submission."""

    USER = "user"
    ADMINISTRATOR = "administrator"


class CanonicalRecord(BaseModel):
    """Flat, export-ready view of one submission.

    Every field is a string; values missing on the raw submission are
    empty strings.  Field names are snake_case in Python and PascalCase
    in every exported artifact (``record.model_dump(by_alias=True)``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
    )

    # Export contract minimum, in column order
    created_date_time: str = ""
    source: str = ""
    category: str = ""
    sender_email_address: str = ""
    recipient_email_address: str = ""
    subject: str = ""
    internet_message_id: str = Field(
        default="",
        description="Canonical identifier including its RETRIEVED:/ALT-ID: provenance marker",
    )
    result_category: str = ""
    result_detail: str = ""
    status: str = ""
    admin_review_result: str = ""
    is_attack_simulation: str = "No"

    message_id_provenance: str = ""
    submission_id: str = ""
    received_date_time: str = ""
    original_category: str = ""
    content_type: str = ""
    client_source: str = ""
    tenant_id: str = ""
    submitted_by: str = ""
    submitted_by_name: str = ""
    user_mailbox_setting: str = ""
    detected_urls: str = ""
    detected_file_names: str = ""
    detected_file_hashes: str = ""
    admin_review_by: str = ""
    admin_review_date_time: str = ""
    attack_simulation_id: str = ""
    attack_simulation_user_id: str = ""
    attack_simulation_date_time: str = ""
    attack_simulation_duration_time: str = ""
    tenant_allow_block_action: str = ""
    tenant_allow_block_expiration: str = ""
    tenant_allow_block_note: str = ""

    @classmethod
    def export_columns(cls) -> list[str]:
        """PascalCase column names in export order."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_export_row(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
