import pytest

from essay_review.core import errors
from essay_review.core.errors import ConflictError, ForbiddenError, InvalidCorrection, NotFoundError
from essay_review.crud import peer_review as review_store
from essay_review.db.models.essay import Essay
from essay_review.db.models.peer_review import PeerReview
from essay_review.schemas.peer_review import CorrectionIn, PeerReviewCreate, PeerReviewUpdate
from essay_review.services import analysis_service, peer_review_service, scoring
from essay_review.services.peer_review_service import ReviewState, is_review_complete, review_state


def _scores(value):
    return dict.fromkeys(scoring.SCORE_FIELDS, value)


def test_create_review_is_idempotent(db, make_essay):
    essay = make_essay()

    first = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate())
    second = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate(grammar_score=10))

    assert first.is_new is True
    assert second.is_new is False
    assert first.review.id == second.review.id
    # 기존 리뷰를 덮어쓰지 않는다
    assert second.review.grammar_score == 100
    assert len(review_store.list_reviews(db, essay.id)) == 1


def test_create_review_defaults(db, make_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    assert review_state(review) is ReviewState.DRAFT
    assert review.overall_score == 600
    assert review.corrections == []
    assert not is_review_complete(review)


@pytest.mark.parametrize("is_public", [True, False])
def test_cannot_review_own_essay(db, make_essay, is_public):
    essay = make_essay(author_id="author-1", is_public=is_public)
    payload = PeerReviewCreate(**_scores(150), is_submitted=True)

    with pytest.raises(ForbiddenError) as exc:
        peer_review_service.create_review(db, essay.id, "author-1", payload)

    assert exc.value.code == errors.CANNOT_REVIEW_OWN_ESSAY
    assert review_store.list_reviews(db, essay.id) == []


def test_create_review_missing_essay(db):
    with pytest.raises(NotFoundError) as exc:
        peer_review_service.create_review(db, "missing", "reader-1", PeerReviewCreate())
    assert exc.value.code == errors.ESSAY_NOT_FOUND


def test_create_review_on_someone_elses_private_essay(db, make_essay):
    essay = make_essay(is_public=False)
    with pytest.raises(ForbiddenError) as exc:
        peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate())
    assert exc.value.code == errors.FORBIDDEN_ACCESS


def test_create_review_anchors_initial_corrections(db, make_essay, sample_essay):
    essay = make_essay()
    start = sample_essay.index("Rivers")
    payload = PeerReviewCreate(corrections=[
        CorrectionIn(category="style", comment="Strong opening", selected_text="Rivers", text_start_index=start),
    ])

    review = peer_review_service.create_review(db, essay.id, "reader-1", payload).review

    assert review.corrections == [{
        "category": "style",
        "selectedText": "Rivers",
        "textStartIndex": start,
        "textEndIndex": start + len("Rivers"),
        "comment": "Strong opening",
    }]


def test_aggregate_follows_every_write(db, make_essay):
    essay = make_essay()

    a = peer_review_service.create_review(db, essay.id, "reader-a", PeerReviewCreate(grammar_score=101)).review
    peer_review_service.create_review(db, essay.id, "reader-b", PeerReviewCreate())

    db.refresh(essay)
    assert a.overall_score == 601
    assert (essay.review_count, essay.average_score) == (2, 601)  # 600.5 -> 601

    peer_review_service.update_review(db, a.id, "reader-a", PeerReviewUpdate(**_scores(150)))

    db.refresh(essay)
    assert a.overall_score == 900
    assert (essay.review_count, essay.average_score) == (2, 750)


def test_update_review_ignores_client_overall(db, make_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    payload = PeerReviewUpdate.model_validate({"grammarScore": 180, "overallScore": 5})
    updated = peer_review_service.update_review(db, review.id, "reader-1", payload)

    assert updated.grammar_score == 180
    assert updated.overall_score == 680


def test_submit_locks_review(db, make_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    submitted = peer_review_service.update_review(
        db, review.id, "reader-1", PeerReviewUpdate(**_scores(120), review_comment="Nice", is_submitted=True)
    )
    assert review_state(submitted) is ReviewState.SUBMITTED
    assert is_review_complete(submitted)

    with pytest.raises(ConflictError) as exc:
        peer_review_service.add_correction(
            db, review.id, "reader-1", CorrectionIn(category="grammar", comment="late")
        )
    assert exc.value.code == errors.REVIEW_ALREADY_SUBMITTED

    with pytest.raises(ConflictError) as exc:
        peer_review_service.update_review(db, review.id, "reader-1", PeerReviewUpdate(grammar_score=10))
    assert exc.value.code == errors.REVIEW_ALREADY_SUBMITTED

    with pytest.raises(ForbiddenError) as exc:
        peer_review_service.update_review(db, review.id, "someone-else", PeerReviewUpdate(grammar_score=10))
    assert exc.value.code == errors.FORBIDDEN_ACCESS

    db.refresh(submitted)
    assert submitted.grammar_score == 120
    assert len(submitted.corrections) == 0


def test_update_review_not_found(db):
    with pytest.raises(NotFoundError) as exc:
        peer_review_service.update_review(db, "missing", "reader-1", PeerReviewUpdate())
    assert exc.value.code == errors.REVIEW_NOT_FOUND


def test_add_correction(db, make_essay, sample_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review
    start = sample_essay.index("the the")

    peer_review_service.add_correction(
        db, review.id, "reader-1",
        CorrectionIn(category="grammar", comment="Repeated word", selected_text="the the",
                     text_start_index=start, text_end_index=start + 7),
    )
    updated = peer_review_service.add_correction(
        db, review.id, "reader-1", CorrectionIn(category="research", comment="Cite the study")
    )

    assert [c["category"] for c in updated.corrections] == ["grammar", "research"]
    assert updated.corrections[0]["textStartIndex"] == start
    assert updated.corrections[1]["textStartIndex"] == 0
    assert updated.corrections[1]["textEndIndex"] == 0


def test_add_correction_rejects_out_of_range_selection(db, make_essay, sample_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    with pytest.raises(InvalidCorrection):
        peer_review_service.add_correction(
            db, review.id, "reader-1",
            CorrectionIn(category="grammar", comment="x", selected_text="tail",
                         text_start_index=len(sample_essay), text_end_index=len(sample_essay) + 4),
        )

    db.refresh(review)
    assert review.corrections == []


def test_add_correction_without_offsets_anchors_first_occurrence(db, make_essay, sample_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    updated = peer_review_service.add_correction(
        db, review.id, "reader-1", CorrectionIn(category="grammar", comment="Repeated word", selected_text="the the")
    )

    stored = updated.corrections[0]
    assert stored["textStartIndex"] == sample_essay.index("the the")
    assert sample_essay[stored["textStartIndex"]:stored["textEndIndex"]] == "the the"


@pytest.mark.parametrize(
    "selected_text, start, end",
    [
        ("not in essay at all", None, None),
        ("not in essay at all", 0, 3),
        ("the the", 0, 7),
    ],
)
def test_add_correction_rejects_selection_that_does_not_match_content(db, make_essay, selected_text, start, end):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review

    with pytest.raises(InvalidCorrection):
        peer_review_service.add_correction(
            db, review.id, "reader-1",
            CorrectionIn(category="grammar", comment="x", selected_text=selected_text,
                         text_start_index=start, text_end_index=end),
        )

    db.refresh(review)
    assert review.corrections == []


def test_create_review_rejects_unanchored_correction(db, make_essay):
    essay = make_essay()
    payload = PeerReviewCreate(corrections=[
        CorrectionIn(category="style", comment="Where?", selected_text="mountains"),
    ])

    with pytest.raises(InvalidCorrection):
        peer_review_service.create_review(db, essay.id, "reader-1", payload)
    assert review_store.list_reviews(db, essay.id) == []


def test_add_correction_access_rules(db, make_essay):
    essay = make_essay()
    review = peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate()).review
    data = CorrectionIn(category="clarity", comment="unclear")

    with pytest.raises(ForbiddenError) as exc:
        peer_review_service.add_correction(db, review.id, "reader-2", data)
    assert exc.value.code == errors.FORBIDDEN_ACCESS

    with pytest.raises(NotFoundError) as exc:
        peer_review_service.add_correction(db, "missing", "reader-1", data)
    assert exc.value.code == errors.REVIEW_NOT_FOUND


def test_humans_cannot_edit_ai_review(db, make_essay, fake_backend, analysis_result):
    essay = make_essay()
    ai_review = analysis_service.analyze_essay(db, essay.id, backend=fake_backend(analysis_result()))

    with pytest.raises(ForbiddenError):
        peer_review_service.update_review(db, ai_review.id, "reader-1", PeerReviewUpdate(grammar_score=1))


def test_failed_aggregate_rolls_back_review(db, make_essay, monkeypatch):
    essay = make_essay()

    def boom(db, essay):
        raise RuntimeError("aggregate update failed")

    monkeypatch.setattr(scoring, "refresh_essay_stats", boom)

    with pytest.raises(RuntimeError):
        peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate(grammar_score=150))

    assert db.query(PeerReview).count() == 0
    assert db.get(Essay, essay.id).review_count == 0


def test_list_reviews_names(db, make_essay, fake_backend, analysis_result):
    from essay_review.db.models.user_profile import UserProfile

    essay = make_essay()
    db.add(UserProfile(user_id="reader-1", display_name="Ana"))
    db.commit()

    peer_review_service.create_review(db, essay.id, "reader-1", PeerReviewCreate())
    peer_review_service.create_review(db, essay.id, "reader-2", PeerReviewCreate())
    analysis_service.analyze_essay(db, essay.id, backend=fake_backend(analysis_result()))

    names = {r.reviewer_id: name for r, name in peer_review_service.list_reviews(db, essay.id)}
    assert names["reader-1"] == "Ana"
    assert names["reader-2"] == "Anonymous Student"
    assert sorted(names.values()).count("AI") == 1
