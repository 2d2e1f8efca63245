"""Comment routes.

The three comment trees share one set of handlers; each subject type gets
its own router under its own prefix.
"""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status
from pydantic import BaseModel, Field

from board.application.usecase.comment import (
    AddCommentRequest,
    AddCommentResponse,
    AddCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    ListCommentsRequest,
    ListCommentsResponse,
    ListCommentsUseCase,
)
from board.domain.error import (
    BadReferenceError,
    NotAuthorizedError,
    NotFoundError,
    ParentNotFoundError,
)
from board.domain.service import JWTService
from board.domain.value import SortDirection, SourceType


class AddCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=10000)
    parent_id: str | None = None  # Parent comment ID for replies


def _require_user(jwt_service: JWTService, auth_token: str | None, action: str) -> str:
    user_id = jwt_service.get_user_id_from_token(auth_token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    return user_id


def build_comment_router(prefix: str, source_type: SourceType) -> APIRouter:
    """Build the comment routes of one subject type.

    Args:
        prefix: URL prefix of the subject collection, e.g. ``/posts``
        source_type: Comment store behind the routes

    Returns:
        Router with list, add and delete endpoints
    """
    router = APIRouter(prefix=prefix, tags=["comments"], route_class=DishkaRoute)

    @router.get("/{subject_id}/comments", response_model=ListCommentsResponse)
    async def list_comments(
        subject_id: str,
        list_comments_use_case: FromDishka[ListCommentsUseCase],
        cursor: str | None = Query(default=None),
        limit: int | None = Query(default=None),
        parent_id: str | None = Query(default=None),
        direction: SortDirection = Query(default=SortDirection.DESC),
    ) -> ListCommentsResponse:
        """Get one page of comments, newest first by default.

        Without ``parent_id`` the top level of the subject is listed; with
        it, the direct replies of that comment.
        """
        try:
            request = ListCommentsRequest(
                source_type=source_type,
                subject_id=subject_id,
                parent_id=parent_id,
                cursor=cursor,
                limit=limit,
                direction=direction,
            )
            return await list_comments_use_case.execute(request)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

    @router.post(
        "/{subject_id}/comments",
        response_model=AddCommentResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def add_comment(
        subject_id: str,
        request: AddCommentAPIRequest,
        add_comment_use_case: FromDishka[AddCommentUseCase],
        jwt_service: FromDishka[JWTService],
        auth_token: str | None = Cookie(default=None),
    ) -> AddCommentResponse:
        """Comment on a subject or reply to another comment.

        Requires authentication.
        """
        user_id = _require_user(jwt_service, auth_token, "create comments")

        try:
            use_case_request = AddCommentRequest(
                source_type=source_type,
                subject_id=subject_id,
                author_id=user_id,
                content=request.content,
                parent_id=request.parent_id,
            )
            return await add_comment_use_case.execute(use_case_request)
        except ParentNotFoundError as e:
            logfire.warn("Comment creation failed - parent not found", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e),
            )
        except NotFoundError as e:
            logfire.warn("Comment creation failed - subject not found", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e),
            )
        except BadReferenceError as e:
            logfire.warn("Comment creation failed - bad parent", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

    @router.delete(
        "/{subject_id}/comments/{comment_id}", response_model=DeleteCommentResponse
    )
    async def delete_comment(
        subject_id: str,
        comment_id: str,
        delete_comment_use_case: FromDishka[DeleteCommentUseCase],
        jwt_service: FromDishka[JWTService],
        auth_token: str | None = Cookie(default=None),
    ) -> DeleteCommentResponse:
        """Delete a comment and every reply below it.

        Only the comment author can delete.
        """
        user_id = _require_user(jwt_service, auth_token, "delete comments")

        try:
            use_case_request = DeleteCommentRequest(
                source_type=source_type,
                subject_id=subject_id,
                comment_id=comment_id,
                user_id=user_id,
            )
            return await delete_comment_use_case.execute(use_case_request)
        except NotAuthorizedError as e:
            logfire.warn("Unauthorized comment delete attempt", error=str(e))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to delete this comment",
            )
        except NotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e),
            )
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )

    return router


post_comments = build_comment_router("/posts", SourceType.POST_COMMENT)
site_review_comments = build_comment_router(
    "/site-reviews", SourceType.SITE_REVIEW_COMMENT
)
scam_report_comments = build_comment_router(
    "/scam-reports", SourceType.SCAM_REPORT_COMMENT
)

routers = [post_comments, site_review_comments, scam_report_comments]
