"""Report endpoints: users flag posts, admins review the queue."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_role
from app.core.exceptions import ConflictException, NotFoundException
from app.crud import DuplicatePendingReport, crud_post, crud_report
from app.models.report import Report
from app.models.user import User
from app.schemas.report import (
    ReportCreate,
    ReportCreatedResponse,
    ReportDetailResponse,
    ReportReason,
    ReportResponse,
    ReportStatusUpdate,
)

logger = logging.getLogger(__name__)

DUPLICATE_REPORT_MESSAGE = "You have already reported this post."

router = APIRouter(tags=["Reports"])


def file_report(db: Session, *, user: User, post_id: int, reason: Optional[str]) -> Report:
    if not crud_post.get_by_id(db, post_id=post_id):
        raise NotFoundException("Post not found")
    try:
        report = crud_report.create_report(db, user_id=user.id, post_id=post_id, reason=reason)
    except DuplicatePendingReport:
        raise ConflictException(DUPLICATE_REPORT_MESSAGE)
    logger.info(f"Report {report.id} filed on post {post_id} by user {user.id}")
    return report


def get_report_or_404(db: Session, report_id: int) -> Report:
    report = crud_report.get(db, report_id)
    if not report:
        raise NotFoundException("Report not found")
    return report


@router.post(
    "/posts/{post_id}/report",
    response_model=ReportCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report a post",
)
def report_post(
    post_id: int,
    report_in: Optional[ReportReason] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReportCreatedResponse:
    reason = report_in.reason if report_in else None
    report = file_report(db, user=current_user, post_id=post_id, reason=reason)
    return ReportCreatedResponse(reported=True, report=ReportResponse.model_validate(report))


@router.post(
    "/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a report",
)
def create_report(
    report_in: ReportCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReportResponse:
    report = file_report(db, user=current_user, post_id=report_in.post_id, reason=report_in.reason)
    return ReportResponse.model_validate(report)


@router.get(
    "/reports",
    response_model=List[ReportDetailResponse],
    status_code=status.HTTP_200_OK,
    summary="List all reports",
    description="**Access:** admin only",
)
def list_reports(
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> List[ReportDetailResponse]:
    reports = crud_report.get_all_with_details(db)
    return [ReportDetailResponse.model_validate(r) for r in reports]


@router.get(
    "/reports/{report_id}",
    response_model=ReportDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get report detail",
    description="**Access:** admin only",
)
def get_report(
    report_id: int,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> ReportDetailResponse:
    return ReportDetailResponse.model_validate(get_report_or_404(db, report_id))


@router.patch(
    "/reports/{report_id}",
    response_model=ReportDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Change report status",
    description="**Access:** admin only. Status is one of pending, resolved, ignored.",
)
def update_report_status(
    report_id: int,
    status_in: ReportStatusUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> ReportDetailResponse:
    report = get_report_or_404(db, report_id)
    try:
        report = crud_report.set_status(db, report=report, status=status_in.status)
    except DuplicatePendingReport:
        raise ConflictException(DUPLICATE_REPORT_MESSAGE)
    logger.info(f"Report {report_id} set to {status_in.status} by admin {current_user.id}")
    return ReportDetailResponse.model_validate(report)
