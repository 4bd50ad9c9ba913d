"""Endpoints reserved for administrators and teamsters."""

from typing import Any

from frontend.api.client import BackendClient
from frontend.models import AuditLogEntry
from frontend.models import Block
from frontend.models import BlockReason
from frontend.models import FeatureFlag
from frontend.models import Member
from frontend.models import PaymentDeadline


# Blocks

def get_blocks(
    client: BackendClient,
    day: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    court_id: int | None = None,
) -> list[Block]:
    # the backend names the range parameters date_range_start/date_range_end
    params: dict[str, Any] = {}
    if day:
        params["date"] = day
    if start_date:
        params["date_range_start"] = start_date
    if end_date:
        params["date_range_end"] = end_date
    if court_id:
        params["court_id"] = court_id
    data = client.get("/api/admin/blocks", params=params)
    return [Block.from_api(b) for b in (data or {}).get("blocks", [])]


def create_blocks(client: BackendClient, data: dict[str, Any]) -> dict[str, Any]:
    return client.post("/api/admin/blocks/", json=data)


def delete_block_batch(client: BackendClient, batch_id: str) -> str:
    data = client.delete(f"/api/admin/blocks/{batch_id}")
    return (data or {}).get("message", "")


# Block reasons

def get_block_reasons(client: BackendClient) -> list[BlockReason]:
    data = client.get("/api/admin/block-reasons")
    return [BlockReason.from_api(r) for r in (data or {}).get("reasons", [])]


def create_block_reason(client: BackendClient, name: str, teamster_usable: bool, is_temporary: bool) -> BlockReason:
    data = client.post(
        "/api/admin/block-reasons",
        json={"name": name, "teamster_usable": teamster_usable, "is_temporary": is_temporary},
    )
    return BlockReason.from_api(data["reason"])


def update_block_reason(client: BackendClient, reason_id: int, data: dict[str, Any]) -> BlockReason:
    return BlockReason.from_api(client.put(f"/api/admin/block-reasons/{reason_id}", json=data))


def delete_block_reason(client: BackendClient, reason_id: int) -> str:
    data = client.delete(f"/api/admin/block-reasons/{reason_id}")
    return (data or {}).get("message", "")


# Members

def get_members(client: BackendClient) -> list[Member]:
    data = client.get("/api/members/")
    return [Member.from_api(m) for m in (data or {}).get("members", [])]


def get_member(client: BackendClient, member_id: str) -> Member:
    return Member.from_api(client.get(f"/api/members/{member_id}"))


def update_member(client: BackendClient, member_id: str, data: dict[str, Any]) -> Member:
    return Member.from_api(client.put(f"/api/members/{member_id}", json=data))


def deactivate_member(client: BackendClient, member_id: str) -> str:
    data = client.post(f"/api/members/{member_id}/deactivate")
    return (data or {}).get("message", "")


def reactivate_member(client: BackendClient, member_id: str) -> str:
    data = client.post(f"/api/members/{member_id}/reactivate")
    return (data or {}).get("message", "")


# Audit log

def get_audit_log(client: BackendClient, log_type: str | None = None, limit: int = 100) -> list[AuditLogEntry]:
    params: dict[str, Any] = {"limit": limit}
    if log_type:
        params["type"] = log_type
    data = client.get("/api/admin/blocks/audit-log", params=params)
    return [AuditLogEntry.from_api(e) for e in (data or {}).get("logs", [])]


# Payment deadline and confirmations

def get_payment_deadline(client: BackendClient) -> PaymentDeadline | None:
    return PaymentDeadline.from_api(client.get("/api/admin/settings/payment-deadline"))


def set_payment_deadline(client: BackendClient, deadline: str) -> str:
    data = client.post("/api/admin/settings/payment-deadline", json={"deadline": deadline})
    return (data or {}).get("message", "")


def clear_payment_deadline(client: BackendClient) -> str:
    data = client.delete("/api/admin/settings/payment-deadline")
    return (data or {}).get("message", "")


def get_pending_payment_confirmations(client: BackendClient) -> list[dict[str, Any]]:
    data = client.get("/api/admin/members/pending-confirmations")
    return (data or {}).get("members", [])


def reject_payment_confirmation(client: BackendClient, member_id: str) -> str:
    data = client.post(f"/api/admin/members/{member_id}/reject-payment-confirmation")
    return (data or {}).get("message", "")


# Feature flags

def get_feature_flags(client: BackendClient) -> list[FeatureFlag]:
    data = client.get("/api/admin/feature-flags")
    return [FeatureFlag.from_api(f) for f in (data or {}).get("flags", [])]


def update_feature_flag(client: BackendClient, flag_id: int, is_enabled: bool) -> str:
    data = client.put(f"/api/admin/feature-flags/{flag_id}", json={"is_enabled": is_enabled})
    return (data or {}).get("message", "")
