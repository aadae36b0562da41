# autoreply/db/crud/comments.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from autoreply.models.db.comments import CommentDB, AutoReplyDB
from autoreply.models.domain.enums import AutoReplyStatus, CreatedBy, Platform, ReplyStatus
from autoreply.core.config import logger
import datetime

async def create_comment(db: AsyncSession, comment_id: str, user_id: str, platform: Platform, comment_text: str) -> CommentDB:
    """Adds a pending comment to the session. Used by ingestion and fixtures."""
    db_comment = CommentDB(
        id=comment_id,
        user_id=user_id,
        platform=platform,
        comment_text=comment_text,
        auto_reply_status=AutoReplyStatus.PENDING,
    )
    db.add(db_comment)
    logger.info(f"Adding comment {comment_id} to session: Text='{comment_text[:50]}...'")
    return db_comment

async def get_comment(db: AsyncSession, comment_id: str) -> CommentDB | None:
    """Retrieves a comment by its ID."""
    result = await db.execute(select(CommentDB).filter(CommentDB.id == comment_id))
    return result.scalars().first()

async def update_comment(db: AsyncSession, comment_id: str, **fields) -> int:
    """
    Field-level update of a single comment keyed by its ID.

    Only the given columns are written, never the whole row. Returns the number
    of rows matched so callers can tell a missing comment from a successful write.
    Commit is handled by the caller.
    """
    logger.info(f"Updating comment {comment_id}: {sorted(fields)}")
    stmt = (
        update(CommentDB)
        .where(CommentDB.id == comment_id)
        .values(**fields, updated_at=datetime.datetime.now(datetime.timezone.utc))
    )
    result = await db.execute(stmt)
    return result.rowcount

async def insert_auto_reply(
    db: AsyncSession,
    user_id: str,
    comment_id: str,
    reply_text: str,
    tone_used: str,
    language_used: str,
) -> AutoReplyDB:
    """
    Inserts an AI-authored reply in pending delivery state.

    Flushes immediately so a duplicate comment_id surfaces as an IntegrityError
    here rather than at commit time.
    """
    db_reply = AutoReplyDB(
        user_id=user_id,
        comment_id=comment_id,
        reply_text=reply_text,
        tone_used=tone_used,
        language_used=language_used,
        reply_status=ReplyStatus.PENDING,
        created_by=CreatedBy.AI,
    )
    db.add(db_reply)
    await db.flush()
    logger.info(f"Stored auto reply {db_reply.id} for comment {comment_id}")
    return db_reply

async def get_auto_replies(db: AsyncSession, comment_id: str) -> list[AutoReplyDB]:
    result = await db.execute(select(AutoReplyDB).filter(AutoReplyDB.comment_id == comment_id))
    return result.scalars().all()
