from satprep.services.stats_service import get_dashboard_stats


def test_dashboard_without_attempts(db) -> None:
    stats = get_dashboard_stats(db, "user-1")
    assert stats.has_progress is False
    assert (stats.best_score, stats.avg_accuracy, stats.tests_taken) == (0, 0, 0)


def test_dashboard_summarizes_completed_attempts(
    db, add_question_set, add_completed_attempt
) -> None:
    test_id = add_question_set("math", count=1).id
    add_completed_attempt("user-1", test_id, correct=4, total=10, seconds=600, score=40)
    add_completed_attempt("user-1", test_id, correct=9, total=10, seconds=600, score=90)
    add_completed_attempt("user-1", test_id, correct=7, total=10, seconds=600, score=70)
    add_completed_attempt("user-2", test_id, correct=10, total=10, seconds=60, score=100)

    stats = get_dashboard_stats(db, "user-1")

    assert stats.has_progress
    assert stats.tests_taken == 3
    assert stats.best_score == 90
    assert stats.avg_accuracy == 67
    assert stats.score_change == 30


def test_single_attempt_has_no_score_change(
    db, add_question_set, add_completed_attempt
) -> None:
    test_id = add_question_set("math", count=1).id
    add_completed_attempt("user-1", test_id, correct=5, total=10, seconds=300)

    stats = get_dashboard_stats(db, "user-1")

    assert stats.tests_taken == 1
    assert stats.score_change == 0
