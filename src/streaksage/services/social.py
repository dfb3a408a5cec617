"""Social graph resolution: who follows whom."""

from __future__ import annotations

from ..domain.repositories import FollowRepository, UserRepository
from ..errors import DuplicateEdge, InvalidEdge, NotFound
from ..logging_config import get_logger
from ..models.social import FollowEdge
from ..models.user import PublicUser

logger = get_logger(__name__)

FOLLOW_POLICY_REJECT = "reject"
FOLLOW_POLICY_IGNORE = "ignore"


def _resolve(user_ids: list[int], users: UserRepository) -> list[PublicUser]:
    resolved = []
    for user_id in user_ids:
        user = users.get_by_id(user_id)
        if user is not None:
            resolved.append(PublicUser.from_user(user))
    return resolved


def following(user_id: int, *, users: UserRepository, follows: FollowRepository) -> list[PublicUser]:
    """Users that ``user_id`` follows, in follow order."""

    return _resolve(follows.following_ids(user_id), users)


def followers(user_id: int, *, users: UserRepository, follows: FollowRepository) -> list[PublicUser]:
    """Users following ``user_id``, in follow order."""

    return _resolve(follows.follower_ids(user_id), users)


def follow(
    follower_id: int,
    following_id: int,
    *,
    users: UserRepository,
    follows: FollowRepository,
    policy: str = FOLLOW_POLICY_REJECT,
) -> FollowEdge:
    """Create a follow edge.

    Raises ``InvalidEdge`` for a self-follow and ``NotFound`` for an unknown
    user on either end. An existing edge raises ``DuplicateEdge`` under the ``reject``
    policy and is returned unchanged under ``ignore``.
    """

    if follower_id == following_id:
        raise InvalidEdge("Users cannot follow themselves")
    for user_id in (follower_id, following_id):
        if users.get_by_id(user_id) is None:
            raise NotFound(f"User {user_id} not found")

    existing = follows.get(follower_id, following_id)
    if existing is None:
        try:
            edge = follows.create(FollowEdge(follower_id=follower_id, following_id=following_id))
        except DuplicateEdge:
            # Lost a race against an identical request
            existing = follows.get(follower_id, following_id)
            if existing is None or policy != FOLLOW_POLICY_IGNORE:
                raise
        else:
            logger.info(
                "Follow created",
                extra={"follower_id": follower_id, "following_id": following_id},
            )
            return edge

    if policy == FOLLOW_POLICY_IGNORE:
        return existing
    raise DuplicateEdge(f"User {follower_id} already follows user {following_id}")


def unfollow(follower_id: int, following_id: int, *, follows: FollowRepository) -> None:
    """Remove a follow edge, raising ``NotFound`` when there is none."""

    edge = follows.get(follower_id, following_id)
    if edge is None or edge.id is None:
        raise NotFound(f"User {follower_id} does not follow user {following_id}")
    follows.delete(edge.id)
    logger.info("Follow removed", extra={"follower_id": follower_id, "following_id": following_id})


__all__ = [
    "FOLLOW_POLICY_IGNORE",
    "FOLLOW_POLICY_REJECT",
    "follow",
    "followers",
    "following",
    "unfollow",
]
