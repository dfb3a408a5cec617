"""SQLModel implementations of the follow edge and support mark repositories."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ...errors import Conflict, DuplicateEdge
from ...models.social import FollowEdge, SupportMark
from ..database import SessionFactory


class SQLModelFollowRepository:
    """SQLModel-based follow edge repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, follower_id: int, following_id: int) -> Optional[FollowEdge]:
        with self.session_factory() as session:
            obj = session.exec(
                select(FollowEdge).where(
                    FollowEdge.follower_id == follower_id,
                    FollowEdge.following_id == following_id,
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, edge: FollowEdge) -> FollowEdge:
        try:
            with self.session_factory() as session:
                session.add(edge)
                session.commit()
                session.refresh(edge)
                session.expunge(edge)
                return edge
        except IntegrityError as exc:
            raise DuplicateEdge(
                f"User {edge.follower_id} already follows user {edge.following_id}"
            ) from exc

    def delete(self, edge_id: int) -> None:
        with self.session_factory() as session:
            edge = session.get(FollowEdge, edge_id)
            if edge:
                session.delete(edge)
                session.commit()

    def following_ids(self, user_id: int) -> list[int]:
        with self.session_factory() as session:
            statement = (
                select(FollowEdge.following_id)
                .where(FollowEdge.follower_id == user_id)
                .order_by(FollowEdge.id)  # type: ignore[arg-type]
            )
            return list(session.exec(statement).all())

    def follower_ids(self, user_id: int) -> list[int]:
        with self.session_factory() as session:
            statement = (
                select(FollowEdge.follower_id)
                .where(FollowEdge.following_id == user_id)
                .order_by(FollowEdge.id)  # type: ignore[arg-type]
            )
            return list(session.exec(statement).all())


class SQLModelSupportRepository:
    """SQLModel-based support mark repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, from_user_id: int, completion_id: int) -> Optional[SupportMark]:
        with self.session_factory() as session:
            obj = session.exec(
                select(SupportMark).where(
                    SupportMark.from_user_id == from_user_id,
                    SupportMark.completion_id == completion_id,
                )
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, mark: SupportMark) -> SupportMark:
        try:
            with self.session_factory() as session:
                session.add(mark)
                session.commit()
                session.refresh(mark)
                session.expunge(mark)
                return mark
        except IntegrityError as exc:
            raise Conflict(
                f"User {mark.from_user_id} already supports completion {mark.completion_id}"
            ) from exc

    def delete(self, mark_id: int) -> None:
        with self.session_factory() as session:
            mark = session.get(SupportMark, mark_id)
            if mark:
                session.delete(mark)
                session.commit()

    def supported_completion_ids(self, from_user_id: int) -> set[int]:
        with self.session_factory() as session:
            statement = select(SupportMark.completion_id).where(
                SupportMark.from_user_id == from_user_id
            )
            return set(session.exec(statement).all())


__all__ = ["SQLModelFollowRepository", "SQLModelSupportRepository"]
