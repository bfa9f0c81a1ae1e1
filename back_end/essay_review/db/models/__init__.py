from essay_review.db.models.essay import Essay  # noqa: F401
from essay_review.db.models.peer_review import PeerReview  # noqa: F401
from essay_review.db.models.essay_like import EssayLike  # noqa: F401
from essay_review.db.models.user_profile import UserProfile  # noqa: F401
from essay_review.db.models.user_correction import UserCorrection  # noqa: F401
