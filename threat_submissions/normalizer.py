"""Submission normalizer: flattens raw emailThreats records into CanonicalRecord."""

from __future__ import annotations

from typing import Any

from .identifiers import IdentifierResolver
from .models import CanonicalRecord, RawSubmission

LIST_SEPARATOR = "; "


def _dig(raw: Any, *path: str) -> Any:
    """Walk nested dicts, returning ``None`` as soon as a step is missing."""
    node = raw
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _text(raw: RawSubmission, *path: str) -> str:
    value = _dig(raw, *path)
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _joined(values: Any, key: str | None = None) -> str:
    """Join a list (optionally of dicts, picking *key*) with the list separator."""
    if not isinstance(values, list):
        return ""
    items = []
    for item in values:
        if key is not None:
            item = item.get(key) if isinstance(item, dict) else None
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item)
        if text:
            items.append(text)
    return LIST_SEPARATOR.join(items)


class SubmissionNormalizer:
    """Normalize raw submissions into the canonical flat record.

    Total: absent nested objects, lists and scalars become empty strings,
    never errors.  The only I/O is the identifier resolver's mailbox lookup.
    """

    def __init__(self, resolver: IdentifierResolver) -> None:
        self._resolver = resolver

    def normalize(self, raw: RawSubmission) -> CanonicalRecord:
        identifier = self._resolver.resolve(raw)
        attack_simulation = raw.get("attackSimulationInfo")
        detected_files = _dig(raw, "result", "detectedFiles")

        return CanonicalRecord(
            created_date_time=_text(raw, "createdDateTime"),
            source=_text(raw, "source"),
            category=_text(raw, "category"),
            sender_email_address=_text(raw, "senderEmailAddress"),
            recipient_email_address=_text(raw, "recipientEmailAddress"),
            subject=_text(raw, "subject"),
            internet_message_id=identifier.canonical,
            result_category=_text(raw, "result", "category"),
            result_detail=_text(raw, "result", "detail"),
            status=_text(raw, "status"),
            admin_review_result=_text(raw, "adminReview", "reviewResult"),
            is_attack_simulation="Yes" if attack_simulation is not None else "No",
            message_id_provenance=identifier.provenance.value,
            submission_id=_text(raw, "id"),
            received_date_time=_text(raw, "receivedDateTime"),
            original_category=_text(raw, "originalCategory"),
            content_type=_text(raw, "contentType"),
            client_source=_text(raw, "clientSource"),
            tenant_id=_text(raw, "tenantId"),
            submitted_by=_text(raw, "createdBy", "user", "email"),
            submitted_by_name=_text(raw, "createdBy", "user", "displayName"),
            user_mailbox_setting=_text(raw, "result", "userMailboxSetting"),
            detected_urls=_joined(_dig(raw, "result", "detectedUrls")),
            detected_file_names=_joined(detected_files, "fileName"),
            detected_file_hashes=_joined(detected_files, "fileHash"),
            admin_review_by=_text(raw, "adminReview", "reviewBy"),
            admin_review_date_time=_text(raw, "adminReview", "reviewDateTime"),
            attack_simulation_id=_text(raw, "attackSimulationInfo", "attackSimId"),
            attack_simulation_user_id=_text(raw, "attackSimulationInfo", "attackSimUserId"),
            attack_simulation_date_time=_text(raw, "attackSimulationInfo", "attackSimDateTime"),
            attack_simulation_duration_time=_text(
                raw, "attackSimulationInfo", "attackSimDurationTime"
            ),
            tenant_allow_block_action=_text(raw, "tenantAllowOrBlockListAction", "action"),
            tenant_allow_block_expiration=_text(
                raw, "tenantAllowOrBlockListAction", "expirationDateTime"
            ),
            tenant_allow_block_note=_text(raw, "tenantAllowOrBlockListAction", "note"),
        )
