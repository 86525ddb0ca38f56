"""Unit tests for the question Navigator."""

from coursequiz.assessment.navigator import Navigator


class TestNavigator:

    def test_starts_at_first_question(self, two_question_activity):
        nav = Navigator(two_question_activity.questions)

        assert nav.index == 0
        assert nav.count == 2
        assert nav.is_first
        assert not nav.is_last
        assert nav.current().id == 1

    def test_next_stops_at_last(self, two_question_activity):
        nav = Navigator(two_question_activity.questions)

        nav.next()
        nav.next()
        nav.next()

        assert nav.index == 1
        assert nav.is_last

    def test_previous_stops_at_first(self, two_question_activity):
        nav = Navigator(two_question_activity.questions)

        nav.previous()

        assert nav.index == 0

    def test_reset_returns_to_first(self, two_question_activity):
        nav = Navigator(two_question_activity.questions)
        nav.next()

        nav.reset(two_question_activity.questions)

        assert nav.index == 0

    def test_empty(self):
        nav = Navigator()

        nav.next()

        assert nav.current() is None
        assert nav.index == 0
