from fastapi import APIRouter
from essay_review.api.v1.endpoints import essays, peer_reviews

router = APIRouter()

router.include_router(essays.router, prefix="/essays", tags=["essays"])
router.include_router(peer_reviews.router, prefix="/peer-reviews", tags=["peer-reviews"])
