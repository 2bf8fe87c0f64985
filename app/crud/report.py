"""CRUD operations for `Report` model."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.post import Post
from app.models.report import Report

logger = logging.getLogger(__name__)


class DuplicatePendingReport(Exception):
    """The user already has a pending report for this post."""


class CRUDReport(CRUDBase[Report, dict, dict]):
    def get_pending(self, db: Session, *, user_id: int, post_id: int) -> Optional[Report]:
        stmt = select(Report).where(
            Report.user_id == user_id,
            Report.post_id == post_id,
            Report.status == "pending",
        ).limit(1)
        return db.scalars(stmt).first()

    def create_report(
        self, db: Session, *, user_id: int, post_id: int, reason: Optional[str] = None
    ) -> Report:
        """Create a pending report.

        Raises:
            DuplicatePendingReport: if a pending report from the same user exists,
                whether found up front or rejected by the partial unique index.
        """
        if self.get_pending(db, user_id=user_id, post_id=post_id):
            raise DuplicatePendingReport()

        report = Report(user_id=user_id, post_id=post_id, reason=reason or None, status="pending")
        try:
            db.add(report)
            db.commit()
            db.refresh(report)
        except IntegrityError as e:
            db.rollback()
            logger.info(f"Concurrent duplicate report user={user_id} post={post_id}")
            raise DuplicatePendingReport() from e
        except Exception:
            db.rollback()
            raise
        return report

    def get_all_with_details(self, db: Session) -> List[Report]:
        stmt = (
            select(Report)
            .options(
                selectinload(Report.post).selectinload(Post.author),
                selectinload(Report.user),
            )
            .order_by(Report.created_at.desc(), Report.id.desc())
        )
        return list(db.scalars(stmt).all())

    def set_status(self, db: Session, *, report: Report, status: str) -> Report:
        """Change the review status.

        Raises:
            DuplicatePendingReport: reopening would give the reporter a second
                pending report on the same post.
        """
        report_id = report.id
        try:
            return self.update(db, db_obj=report, obj_in={"status": status})
        except IntegrityError as e:
            logger.info(f"Report {report_id} cannot be reopened: a pending report already exists")
            raise DuplicatePendingReport() from e


# Singleton instance
crud_report = CRUDReport(Report)
