"""
Reaction engine — toggle votes and likes while keeping counters exact.

Every target (feedback item, comment, reply) carries a positive and a
negative counter, and each subject holds at most one reaction record per
target. A toggle moves the (target, subject) pair between three states:

    none      --R-->  R          create record,  counter[R] += 1
    R         --R-->  none       delete record,  counter[R] -= 1
    other     --R-->  R          update record,  counter[other] -= 1, counter[R] += 1

The record change and the counter changes run in one transaction, with the
target row locked first. Lost races are retried; anything else rolls back
and surfaces as a StorageError.
"""

from __future__ import annotations

import abc
import asyncio
import enum
import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends
from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from featureboard.config import settings
from featureboard.database import get_session_factory
from featureboard.errors import ConflictError, NotFound, StorageError
from featureboard.models.comment import Comment, CommentReply
from featureboard.models.feedback import Feedback
from featureboard.models.reaction import CommentReaction
from featureboard.models.vote import Vote, VoteType

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
_RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03"}


# ═══════════════════════════════════════════════════════════════
#  State machine
# ═══════════════════════════════════════════════════════════════

class RecordChange(str, enum.Enum):
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


@dataclass(frozen=True)
class Transition:
    change: RecordChange
    result: Optional[bool]
    deltas: Tuple[Tuple[bool, int], ...]


def plan_toggle(current: Optional[bool], requested: bool) -> Transition:
    """
    Decide what a toggle does. ``True`` is the positive reaction (upvote,
    like), ``False`` the negative one, ``None`` no reaction.
    """
    if current is None:
        return Transition(RecordChange.CREATE, requested, ((requested, +1),))
    if current == requested:
        return Transition(RecordChange.DELETE, None, ((requested, -1),))
    return Transition(RecordChange.UPDATE, requested, ((current, -1), (requested, +1)))


# ═══════════════════════════════════════════════════════════════
#  Stores
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ExistingReaction:
    id: int
    positive: bool


@dataclass(frozen=True)
class ToggleOutcome:
    target_id: int
    reaction: Optional[bool]
    positive_count: int
    negative_count: int


class ReactionStore(abc.ABC):
    """Reaction records plus the counter pair of one kind of target."""

    name = "reaction"

    def __init__(self, target_model, positive_counter, negative_counter):
        self.target_model = target_model
        self.positive_counter = positive_counter
        self.negative_counter = negative_counter

    async def lock_target(self, db: AsyncSession, target_id: int) -> bool:
        if db.get_bind().dialect.name == "sqlite":
            # no row locks in SQLite; a no-op write takes the database write lock
            result = await db.execute(
                update(self.target_model)
                .where(self.target_model.id == target_id)
                .values({self.target_model.id: self.target_model.id})
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

        result = await db.execute(
            select(self.target_model.id)
            .where(self.target_model.id == target_id)
            .with_for_update()
        )
        return result.scalar_one_or_none() is not None

    async def adjust_counter(self, db: AsyncSession, target_id: int, positive: bool, delta: int) -> None:
        column = self.positive_counter if positive else self.negative_counter
        await db.execute(
            update(self.target_model)
            .where(self.target_model.id == target_id)
            .values({column: column + delta})
            .execution_options(synchronize_session=False)
        )

    async def read_counters(self, db: AsyncSession, target_id: int) -> Tuple[int, int]:
        result = await db.execute(
            select(self.positive_counter, self.negative_counter).where(self.target_model.id == target_id)
        )
        positive, negative = result.one()
        return positive, negative

    @abc.abstractmethod
    async def get_reaction(self, db: AsyncSession, target_id: int, subject_id: int) -> Optional[ExistingReaction]:
        ...

    @abc.abstractmethod
    async def upsert_reaction(self, db: AsyncSession, target_id: int, subject_id: int, positive: bool) -> None:
        ...

    @abc.abstractmethod
    async def delete_reaction(self, db: AsyncSession, reaction_id: int) -> None:
        ...


class VoteStore(ReactionStore):
    name = "vote"

    def __init__(self):
        super().__init__(Feedback, Feedback.upvotes, Feedback.downvotes)

    async def get_reaction(self, db, target_id, subject_id):
        result = await db.execute(
            select(Vote.id, Vote.vote_type).where(Vote.feedback_id == target_id, Vote.user_id == subject_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return ExistingReaction(id=row.id, positive=VoteType(row.vote_type) is VoteType.UPVOTE)

    async def upsert_reaction(self, db, target_id, subject_id, positive):
        vote_type = VoteType.UPVOTE if positive else VoteType.DOWNVOTE
        result = await db.execute(
            update(Vote)
            .where(Vote.feedback_id == target_id, Vote.user_id == subject_id)
            .values(vote_type=vote_type)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.add(Vote(feedback_id=target_id, user_id=subject_id, vote_type=vote_type))
            await db.flush()

    async def delete_reaction(self, db, reaction_id):
        await db.execute(
            delete(Vote).where(Vote.id == reaction_id).execution_options(synchronize_session=False)
        )


class LikeStore(ReactionStore):
    """Likes/dislikes in ``comment_reactions``, on either comments or replies."""

    def __init__(self, target_model, target_column, name: str):
        super().__init__(target_model, target_model.likes, target_model.dislikes)
        self.target_column = target_column
        self.name = name

    async def get_reaction(self, db, target_id, subject_id):
        result = await db.execute(
            select(CommentReaction.id, CommentReaction.is_like).where(
                self.target_column == target_id,
                CommentReaction.user_id == subject_id,
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return ExistingReaction(id=row.id, positive=bool(row.is_like))

    async def upsert_reaction(self, db, target_id, subject_id, positive):
        result = await db.execute(
            update(CommentReaction)
            .where(self.target_column == target_id, CommentReaction.user_id == subject_id)
            .values(is_like=positive)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.add(CommentReaction(**{self.target_column.key: target_id}, user_id=subject_id, is_like=positive))
            await db.flush()

    async def delete_reaction(self, db, reaction_id):
        await db.execute(
            delete(CommentReaction)
            .where(CommentReaction.id == reaction_id)
            .execution_options(synchronize_session=False)
        )


FEEDBACK_VOTES = VoteStore()
COMMENT_LIKES = LikeStore(Comment, CommentReaction.comment_id, "comment")
REPLY_LIKES = LikeStore(CommentReply, CommentReaction.reply_id, "reply")


# ═══════════════════════════════════════════════════════════════
#  Engine
# ═══════════════════════════════════════════════════════════════

def _is_lost_race(exc: DBAPIError) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _RETRYABLE_SQLSTATES:
        return True
    return "database is locked" in str(orig).lower()


class ReactionEngine:
    def __init__(
        self,
        store: ReactionStore,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        max_attempts: int = 5,
        backoff_seconds: float = 0.05,
    ):
        self.store = store
        self._session_factory = session_factory
        self._max_attempts = max(1, max_attempts)
        self._backoff = backoff_seconds

    async def toggle(self, target_id: int, subject_id: int, positive: bool) -> ToggleOutcome:
        """Apply one toggle, retrying lost races; raises NotFound, ConflictError or StorageError."""
        for attempt in range(1, self._max_attempts + 1):
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        return await self._apply(session, target_id, subject_id, positive)
            except DBAPIError as exc:
                if not _is_lost_race(exc):
                    logger.exception("%s toggle on %s failed", self.store.name, target_id)
                    raise StorageError() from exc
                logger.warning(
                    "%s toggle on %s by user %s lost a race (attempt %d/%d): %s",
                    self.store.name, target_id, subject_id, attempt, self._max_attempts, exc.orig,
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._backoff * attempt * (1 + random.random()))

        raise ConflictError(f"Could not apply {self.store.name} after {self._max_attempts} attempts")

    async def _apply(self, db: AsyncSession, target_id: int, subject_id: int, positive: bool) -> ToggleOutcome:
        store = self.store
        if not await store.lock_target(db, target_id):
            raise NotFound(f"{store.name.capitalize()} target not found")

        existing = await store.get_reaction(db, target_id, subject_id)
        transition = plan_toggle(existing.positive if existing else None, positive)

        if transition.change is RecordChange.DELETE:
            await store.delete_reaction(db, existing.id)
        else:
            await store.upsert_reaction(db, target_id, subject_id, positive)

        for counter_positive, delta in transition.deltas:
            await store.adjust_counter(db, target_id, counter_positive, delta)

        positive_count, negative_count = await store.read_counters(db, target_id)
        return ToggleOutcome(
            target_id=target_id,
            reaction=transition.result,
            positive_count=positive_count,
            negative_count=negative_count,
        )


def engine_for(store: ReactionStore):
    """FastAPI dependency yielding a ``ReactionEngine`` over ``store``."""

    def build(
        session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    ) -> ReactionEngine:
        return ReactionEngine(
            store,
            session_factory,
            max_attempts=settings.REACTION_MAX_ATTEMPTS,
            backoff_seconds=settings.REACTION_RETRY_BACKOFF_SECONDS,
        )

    return build
