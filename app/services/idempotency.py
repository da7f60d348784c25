"""
Idempotent listing creation.

A poster may send an Idempotency-Key with a create. The first request claims
the key (scoped to the user) and stores the response it produced; a retry
with the same key and the same body gets that response back instead of a
second listing. Reusing a key for a different body is a conflict.
"""
import hashlib
import json

from fastapi import Header
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, ValidationFailed
from app.models.idempotency import IdempotencyKey
from app.services.auth import Actor

MAX_KEY_LENGTH = 200


def request_fingerprint(path: str, body: dict) -> str:
    canonical = json.dumps([path, body], sort_keys=True, separators=(",", ":"), default=str)
    return "sha256:" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()


async def optional_idempotency_key(idempotency_key: str | None = Header(default=None)) -> str | None:
    if idempotency_key and len(idempotency_key) > MAX_KEY_LENGTH:
        raise ValidationFailed(f"Idempotency-Key must be at most {MAX_KEY_LENGTH} characters")
    return idempotency_key or None


async def _lookup(db: AsyncSession, user_id: str, key: str) -> IdempotencyKey | None:
    return (
        await db.execute(
            select(IdempotencyKey).where(IdempotencyKey.user_id == user_id, IdempotencyKey.key == key)
        )
    ).scalar_one_or_none()


async def claim_idempotency_key(
    db: AsyncSession,
    *,
    actor: Actor,
    key: str,
    fingerprint: str,
) -> dict | None:
    """
    Returns the stored response when the key was already used for this same
    request. Otherwise claims the key in the current transaction and returns
    None; the claim becomes durable with the caller's commit.
    """
    existing = await _lookup(db, actor.user_id, key)
    if existing:
        if existing.request_hash != fingerprint:
            raise Conflict("Idempotency-Key was already used for a different request")
        return existing.response

    db.add(IdempotencyKey(
        user_id=actor.user_id,
        actor_api_key_id=actor.api_key_id,
        key=key,
        request_hash=fingerprint,
        response={},
    ))
    try:
        await db.flush()
    except IntegrityError:
        # a concurrent request holding the same key got there first
        await db.rollback()
        raise Conflict("A request with this Idempotency-Key is already in progress")
    return None


async def save_idempotent_response(db: AsyncSession, *, actor: Actor, key: str, response: dict) -> None:
    row = await _lookup(db, actor.user_id, key)
    row.response = response
    await db.flush()
