from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.orm import Session

from essay_review.api.deps import get_current_user_id, get_optional_user_id
from essay_review.db.session import get_db
from essay_review.schemas.essay import EssayCreate, EssayOut, EssayUpdate, LikeCountOut, LikeToggleOut
from essay_review.schemas.peer_review import BatchAnalyzeOut, PeerReviewCreate, PeerReviewOut, review_out
from essay_review.schemas.user_correction import UserCorrectionCreate, UserCorrectionOut
from essay_review.services import (
    analysis_service,
    essay_like_service,
    essay_service,
    peer_review_service,
    user_correction_service,
)

router = APIRouter()


# ---------------------------------------------------------  조회

@router.get("", response_model=list[EssayOut])
def list_essays(
    is_public: bool | None = Query(default=None, alias="isPublic"),
    author_id: str | None = Query(default=None, alias="authorId"),
    exclude_author_id: str | None = Query(default=None, alias="excludeAuthorId"),
    search: str | None = None,
    user_id: str | None = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    return essay_service.list_essays(
        db,
        user_id,
        is_public=is_public,
        author_id=author_id,
        exclude_author_id=exclude_author_id,
        search=search,
    )


@router.get("/{essay_id}", response_model=EssayOut)
def get_essay(essay_id: str, user_id: str | None = Depends(get_optional_user_id), db: Session = Depends(get_db)):
    return essay_service.get_essay(db, essay_id, user_id)


@router.get("/{essay_id}/likes", response_model=LikeCountOut)
def get_likes(essay_id: str, user_id: str | None = Depends(get_optional_user_id), db: Session = Depends(get_db)):
    return LikeCountOut(count=essay_like_service.count_likes(db, essay_id, user_id))


@router.get("/{essay_id}/peer-reviews", response_model=list[PeerReviewOut])
def list_peer_reviews(essay_id: str, user_id: str | None = Depends(get_optional_user_id), db: Session = Depends(get_db)):
    # 리뷰 목록도 에세이 읽기 권한을 따른다
    essay_service.get_essay(db, essay_id, user_id)
    return [review_out(r, name) for r, name in peer_review_service.list_reviews(db, essay_id)]


@router.get("/{essay_id}/user-corrections", response_model=list[UserCorrectionOut])
def list_user_corrections(essay_id: str, user_id: str | None = Depends(get_optional_user_id), db: Session = Depends(get_db)):
    return user_correction_service.list_corrections(db, essay_id, user_id)


# ---------------------------------------------------------  쓰기 (로그인 필요)

@router.post("", response_model=EssayOut, status_code=201)
def create_essay(
    payload: EssayCreate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = essay_service.create_essay(db, user_id, payload)
    if result.needs_analysis:
        # 응답은 기다리지 않음. is_analyzed 는 잠시 false 로 보일 수 있다
        background_tasks.add_task(analysis_service.analyze_essay_in_background, result.essay.id)
    return result.essay


@router.put("/{essay_id}", response_model=EssayOut)
def update_essay(
    essay_id: str,
    payload: EssayUpdate,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = essay_service.update_essay(db, essay_id, user_id, payload)
    if result.needs_analysis:
        background_tasks.add_task(analysis_service.analyze_essay_in_background, result.essay.id)
    return result.essay


@router.delete("/{essay_id}", status_code=204)
def delete_essay(essay_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    essay_service.delete_essay(db, essay_id, user_id)
    return Response(status_code=204)


@router.post("/batch-analyze", response_model=BatchAnalyzeOut)
def batch_analyze(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    stats = analysis_service.batch_analyze_essays(db)
    return BatchAnalyzeOut(**stats.as_dict())


@router.post("/{essay_id}/analyze", response_model=PeerReviewOut)
def analyze_essay(essay_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    review = analysis_service.analyze_essay(db, essay_id, requester_id=user_id)
    return review_out(review, "AI")


@router.post("/{essay_id}/user-corrections", response_model=UserCorrectionOut, status_code=201)
def create_user_correction(
    essay_id: str,
    payload: UserCorrectionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return user_correction_service.create_correction(db, essay_id, user_id, payload)


@router.post("/{essay_id}/like", response_model=LikeToggleOut)
def toggle_like(essay_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return LikeToggleOut(liked=essay_like_service.toggle_like(db, essay_id, user_id))


@router.post("/{essay_id}/peer-reviews", response_model=PeerReviewOut, status_code=201)
def create_peer_review(
    essay_id: str,
    payload: PeerReviewCreate,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = peer_review_service.create_review(db, essay_id, user_id, payload)
    if not result.is_new:
        # 이미 있던 리뷰 -> 200
        response.status_code = 200
    return review_out(result.review)
