"""Support marks ("likes") on completions."""

from __future__ import annotations

from ..domain.repositories import CompletionRepository, SupportRepository
from ..errors import Conflict, NotFound
from ..logging_config import get_logger
from ..models.social import SupportMark

logger = get_logger(__name__)


def support_completion(
    user_id: int,
    completion_id: int,
    *,
    completions: CompletionRepository,
    supports: SupportRepository,
) -> SupportMark:
    if completions.get_by_id(completion_id) is None:
        raise NotFound(f"Completion {completion_id} not found")
    if supports.get(user_id, completion_id) is not None:
        raise Conflict(f"User {user_id} already supports completion {completion_id}")
    mark = supports.create(SupportMark(from_user_id=user_id, completion_id=completion_id))
    logger.info("Completion supported", extra={"user_id": user_id, "completion_id": completion_id})
    return mark


def unsupport_completion(user_id: int, completion_id: int, *, supports: SupportRepository) -> None:
    mark = supports.get(user_id, completion_id)
    if mark is None or mark.id is None:
        raise NotFound(f"User {user_id} has not supported completion {completion_id}")
    supports.delete(mark.id)


__all__ = ["support_completion", "unsupport_completion"]
