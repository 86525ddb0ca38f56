"""Unit tests for build_review."""

from coursequiz.assessment.review import build_review
from coursequiz.core.models import Feedback, Result


def _options(review):
    return {o.option.id: o for o in review.options}


class TestBuildReview:

    def test_one_entry_per_question_in_order(self, two_question_activity, graded_result):
        reviews = build_review(two_question_activity, {1: 1, 2: 3}, graded_result)

        assert [r.question.id for r in reviews] == [1, 2]
        assert [r.number for r in reviews] == [1, 2]

    def test_correct_answer(self, two_question_activity, graded_result):
        review = build_review(two_question_activity, {1: 1, 2: 3}, graded_result)[0]
        options = _options(review)

        assert review.correct is True
        assert options[1].chosen and options[1].correct and options[1].matched
        assert options[1].label == "your answer - correct"
        assert not options[2].chosen and not options[2].correct
        assert options[2].label == ""

    def test_wrong_answer(self, two_question_activity, graded_result):
        review = build_review(two_question_activity, {1: 1, 2: 3}, graded_result)[1]
        options = _options(review)

        assert review.correct is False
        assert review.chosen_option_id == 3
        assert options[3].chosen and not options[3].correct and not options[3].matched
        assert options[3].label == "your answer - incorrect"
        assert not options[4].chosen and options[4].correct
        assert options[4].label == "correct"
        assert review.explanation == "DNS maps names to addresses."

    def test_missing_feedback(self, two_question_activity):
        result = Result(
            score=100,
            error_count=0,
            feedback=(Feedback(question_id=1, correct=True, correct_option_id=1),),
        )

        review = build_review(two_question_activity, {1: 1, 2: 4}, result)[1]

        assert review.feedback is None
        assert review.correct is None
        assert not any(o.correct for o in review.options)
        assert _options(review)[4].chosen
        assert _options(review)[4].label == "your answer"

    def test_does_not_modify_answers(self, two_question_activity, graded_result):
        answers = {1: 1, 2: 3}

        build_review(two_question_activity, answers, graded_result)

        assert answers == {1: 1, 2: 3}

    def test_label_follows_grader_verdict(self, two_question_activity):
        """The grader's verdict decides the label even without a correct option id."""
        result = Result(
            score=100,
            error_count=0,
            feedback=(
                Feedback(question_id=1, correct=True, correct_option_id=None),
                Feedback(question_id=2, correct=False, correct_option_id=None),
            ),
        )

        first, second = build_review(two_question_activity, {1: 2, 2: 3}, result)

        assert first.correct is True
        assert _options(first)[2].label == "your answer - correct"
        assert not _options(first)[2].matched
        assert _options(second)[3].label == "your answer - incorrect"
        assert not any(o.correct for o in first.options + second.options)
