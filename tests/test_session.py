"""Tests for challenge editing sessions."""

import pytest

from iac_doctor.challenges import CHALLENGES, ChallengeSession, SessionState


@pytest.fixture
def session():
    """Session for the external access challenge."""
    return ChallengeSession(3)


class TestChallengeSession:
    """Tests for the session state machine."""

    def test_starts_unmodified(self, session):
        assert session.state == SessionState.UNMODIFIED
        assert session.text == CHALLENGES[3].broken_text
        assert session.hint.has_changes is False
        assert session.hint.likely_correct is False
        assert session.hints == CHALLENGES[3].hints

    def test_edit_moves_to_editing(self, session):
        hint = session.edit(session.text.replace("ClusterIP", "NodePort"))

        assert session.state == SessionState.EDITING
        assert hint.has_changes is True
        assert hint.likely_correct is True

    def test_editing_back_to_original(self, session):
        session.edit("something")
        session.edit(CHALLENGES[3].broken_text)

        assert session.state == SessionState.UNMODIFIED

    def test_submit_broken(self, session):
        outcome = session.submit()

        assert outcome.passed is False
        assert session.state == SessionState.STILL_BROKEN
        assert session.last_outcome is outcome

    def test_apply_solution_then_submit(self, session):
        assert session.apply_solution() is True
        assert session.state == SessionState.EDITING

        outcome = session.submit()

        assert outcome.passed is True
        assert session.state == SessionState.SOLVED

    def test_solved_can_be_reopened(self, session):
        session.apply_solution()
        session.submit()

        session.edit(CHALLENGES[3].broken_text + "\n# more")
        assert session.state == SessionState.EDITING
        assert session.submit().passed is False

    def test_reset_restores_broken_text(self, session):
        session.apply_solution()
        session.submit()

        session.reset()

        assert session.text == CHALLENGES[3].broken_text
        assert session.state == SessionState.UNMODIFIED
        assert session.last_outcome is None
        assert session.hint.has_changes is False

    def test_reset_is_idempotent(self, session):
        session.edit("anything")
        session.reset()
        first = (session.text, session.state, session.hint)
        session.reset()

        assert (session.text, session.state, session.hint) == first


class TestGenericSession:
    """Sessions for challenges without dedicated checks."""

    def test_no_reference_solution(self):
        session = ChallengeSession(77, original="apiVersion: v1\nkind: Pod\n")

        assert session.broken_text == "apiVersion: v1\nkind: Pod\n"
        assert session.apply_solution() is False
        assert session.state == SessionState.UNMODIFIED
