"""Property-based tests for the application lifecycle state machine."""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings, strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, rule

from crewmatch.core.models import (
    ActorRole,
    ApplicationStatus,
    InterviewDetails,
    NotificationKind,
)
from crewmatch.errors import InvalidTransitionError, TerminalStateError, TransitionError
from crewmatch.jobs.application import (
    EMPLOYER_TRANSITIONS,
    TERMINAL_STATUSES,
    ApplicationLifecycle,
    allowed_transitions,
    create_application_lifecycle,
    is_terminal,
)
from tests.strategies import make_application

NOW = datetime(2024, 6, 15, 9, 30, tzinfo=timezone.utc)

NON_TERMINAL = [s for s in ApplicationStatus if s not in TERMINAL_STATUSES]

# Position along the employer workflow; terminal statuses rank last.
WORKFLOW_ORDER = {
    ApplicationStatus.PENDING: 0,
    ApplicationStatus.REVIEWING: 1,
    ApplicationStatus.INTERVIEW_SCHEDULED: 2,
    ApplicationStatus.INTERVIEW_COMPLETED: 3,
    ApplicationStatus.OFFER_SENT: 4,
    ApplicationStatus.ACCEPTED: 5,
    ApplicationStatus.REJECTED: 5,
    ApplicationStatus.WITHDRAWN: 5,
}

EXPECTED_EDGES = {
    (ApplicationStatus.PENDING, ApplicationStatus.REVIEWING),
    (ApplicationStatus.PENDING, ApplicationStatus.REJECTED),
    (ApplicationStatus.REVIEWING, ApplicationStatus.INTERVIEW_SCHEDULED),
    (ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED),
    (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.INTERVIEW_COMPLETED),
    (ApplicationStatus.INTERVIEW_SCHEDULED, ApplicationStatus.REJECTED),
    (ApplicationStatus.INTERVIEW_COMPLETED, ApplicationStatus.OFFER_SENT),
    (ApplicationStatus.INTERVIEW_COMPLETED, ApplicationStatus.REJECTED),
    (ApplicationStatus.OFFER_SENT, ApplicationStatus.ACCEPTED),
    (ApplicationStatus.OFFER_SENT, ApplicationStatus.REJECTED),
}

statuses = st.sampled_from(list(ApplicationStatus))
roles = st.sampled_from(list(ActorRole))


@pytest.fixture
def lifecycle():
    return create_application_lifecycle()


@pytest.mark.property
class TestLifecycleProperties:
    """Property-based tests over every (status, role, requested) triple."""

    @given(current=statuses, requested=statuses, role=roles)
    @settings(max_examples=300, deadline=None)
    def test_transition_succeeds_only_along_employer_edges(self, current, requested, role):
        lifecycle = ApplicationLifecycle()
        application = make_application(status=current)

        try:
            result = lifecycle.transition(application, role, requested, "note", NOW)
        except TransitionError:
            assert role != ActorRole.EMPLOYER or (current, requested) not in EXPECTED_EDGES
            return

        assert role == ActorRole.EMPLOYER
        assert (current, requested) in EXPECTED_EDGES
        assert result.application.status == requested
        assert WORKFLOW_ORDER[requested] > WORKFLOW_ORDER[current]

    @given(current=st.sampled_from(sorted(TERMINAL_STATUSES)), requested=statuses, role=roles)
    @settings(max_examples=100, deadline=None)
    def test_terminal_states_reject_everything(self, current, requested, role):
        lifecycle = ApplicationLifecycle()
        application = make_application(status=current)

        with pytest.raises(TerminalStateError):
            lifecycle.transition(application, role, requested, None, NOW)
        with pytest.raises(TerminalStateError):
            lifecycle.withdraw(application, role, None, NOW)

    @given(current=statuses, requested=statuses, role=roles)
    @settings(max_examples=100, deadline=None)
    def test_rejected_transitions_leave_input_untouched(self, current, requested, role):
        application = make_application(status=current, feedback="original")
        snapshot = application.model_dump()

        try:
            ApplicationLifecycle().transition(application, role, requested, "changed", NOW)
        except TransitionError:
            pass

        assert application.model_dump() == snapshot


class TestTransitionTable:
    def test_table_matches_expected_edges(self):
        edges = {(src, dst) for src, targets in EMPLOYER_TRANSITIONS.items() for dst in targets}

        assert edges == EXPECTED_EDGES

    @pytest.mark.parametrize("status", NON_TERMINAL)
    def test_rejected_reachable_from_every_non_terminal_state(self, lifecycle, status):
        result = lifecycle.transition(make_application(status=status), ActorRole.EMPLOYER, "rejected", "", NOW)

        assert result.application.status == ApplicationStatus.REJECTED

    def test_helpers(self):
        assert is_terminal(ApplicationStatus.ACCEPTED)
        assert is_terminal("withdrawn")
        assert not is_terminal(ApplicationStatus.OFFER_SENT)
        assert allowed_transitions(ApplicationStatus.ACCEPTED) == frozenset()
        assert allowed_transitions("pending") == {ApplicationStatus.REVIEWING, ApplicationStatus.REJECTED}


class TestTransitions:
    def test_skipping_reviewing_is_invalid(self, lifecycle):
        with pytest.raises(InvalidTransitionError) as exc_info:
            lifecycle.transition(make_application(), ActorRole.EMPLOYER, "interview_scheduled", "", NOW)

        assert exc_info.value.current_status == "pending"
        assert exc_info.value.requested_status == "interview_scheduled"

    def test_offer_accepted_produces_notification(self, lifecycle):
        application = make_application(status=ApplicationStatus.OFFER_SENT)

        result = lifecycle.transition(application, ActorRole.EMPLOYER, ApplicationStatus.ACCEPTED, "Welcome aboard", NOW)

        assert result.application.status == ApplicationStatus.ACCEPTED
        assert result.previous_status == ApplicationStatus.OFFER_SENT
        assert result.notification.kind == NotificationKind.STATUS_CHANGED
        assert result.notification.recipient_id == "cand-1"
        assert result.notification.payload["new_status"] == "accepted"
        assert result.notification.payload["previous_status"] == "offer_sent"
        assert result.notification.payload["application_id"] == "app-1"

    def test_success_stamps_time_and_appends_feedback(self, lifecycle):
        first = lifecycle.transition(make_application(), ActorRole.EMPLOYER, "reviewing", "Looks good", NOW)
        later = NOW + timedelta(days=1)
        second = lifecycle.transition(first.application, ActorRole.EMPLOYER, "interview_scheduled", "", later)

        application = second.application
        assert application.updated_at == later
        assert application.feedback == "Looks good"
        assert [entry.status for entry in application.feedback_log] == [
            ApplicationStatus.REVIEWING,
            ApplicationStatus.INTERVIEW_SCHEDULED,
        ]
        assert [entry.text for entry in application.feedback_log] == ["Looks good", ""]
        assert all(entry.actor_role == ActorRole.EMPLOYER for entry in application.feedback_log)

    def test_input_application_is_not_mutated(self, lifecycle):
        application = make_application()

        lifecycle.transition(application, ActorRole.EMPLOYER, "reviewing", "ok", NOW)

        assert application.status == ApplicationStatus.PENDING
        assert application.feedback_log == ()

    def test_interview_details_stored_when_scheduling(self, lifecycle):
        details = InterviewDetails(date="2024-06-20 14:00", contact_info="010-0000-0000")
        application = make_application(status=ApplicationStatus.REVIEWING)

        result = lifecycle.transition(
            application, ActorRole.EMPLOYER, "interview_scheduled", "See you", NOW, interview=details
        )

        assert result.application.interview == details

    @pytest.mark.parametrize("role", [ActorRole.CANDIDATE, ActorRole.ADMIN])
    def test_non_employer_cannot_advance(self, lifecycle, role):
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(make_application(), role, "reviewing", "", NOW)

    def test_lateral_and_backward_moves_are_invalid(self, lifecycle):
        application = make_application(status=ApplicationStatus.INTERVIEW_COMPLETED)

        for target in ("interview_completed", "reviewing", "pending", "accepted", "withdrawn"):
            with pytest.raises(InvalidTransitionError):
                lifecycle.transition(application, ActorRole.EMPLOYER, target, "", NOW)


class TestUnknownInput:
    def test_unknown_status_is_an_invalid_transition(self, lifecycle):
        with pytest.raises(InvalidTransitionError) as exc_info:
            lifecycle.transition(make_application(), ActorRole.EMPLOYER, "hired", "", NOW)

        assert exc_info.value.current_status == "pending"
        assert exc_info.value.requested_status == "hired"

    def test_terminal_check_precedes_status_parsing(self, lifecycle):
        application = make_application(status=ApplicationStatus.ACCEPTED)

        with pytest.raises(TerminalStateError) as exc_info:
            lifecycle.transition(application, ActorRole.EMPLOYER, "hired", "", NOW)

        assert exc_info.value.requested_status == "hired"

    def test_unknown_role_is_an_invalid_transition(self, lifecycle):
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(make_application(), "guest", "reviewing", "", NOW)
        with pytest.raises(InvalidTransitionError):
            lifecycle.withdraw(make_application(), "guest", None, NOW)

    @given(requested=st.text(max_size=12).filter(lambda s: s not in {m.value for m in ApplicationStatus}))
    @settings(max_examples=50, deadline=None)
    def test_arbitrary_status_text_never_escapes_as_value_error(self, requested):
        with pytest.raises(TransitionError):
            ApplicationLifecycle().transition(make_application(), ActorRole.EMPLOYER, requested, "", NOW)


class TestWithdrawal:
    @pytest.mark.parametrize("status", NON_TERMINAL)
    def test_candidate_can_withdraw_from_any_non_terminal_state(self, lifecycle, status):
        result = lifecycle.withdraw(make_application(status=status), ActorRole.CANDIDATE, "Found another job", NOW)

        assert result.application.status == ApplicationStatus.WITHDRAWN
        assert result.notification.recipient_id == "emp-1"
        assert result.notification.payload["new_status"] == "withdrawn"
        assert result.application.feedback_log[-1].actor_role == ActorRole.CANDIDATE

    def test_employer_cannot_withdraw(self, lifecycle):
        with pytest.raises(InvalidTransitionError):
            lifecycle.withdraw(make_application(), ActorRole.EMPLOYER, None, NOW)


class ApplicationLifecycleStateMachine(RuleBasedStateMachine):
    """Stateful testing: random walks never leave the transition table."""

    def __init__(self):
        super().__init__()
        self.lifecycle = ApplicationLifecycle()
        self.application = None
        self.history = []
        self.clock = NOW

    @initialize()
    def setup(self):
        self.application = make_application()
        self.history = [self.application.status]

    @rule(requested=statuses, role=roles, feedback=st.text(max_size=20))
    def request_transition(self, requested, role, feedback):
        """Rule: request an arbitrary status change."""
        self.clock += timedelta(minutes=5)
        before = self.application

        try:
            result = self.lifecycle.transition(before, role, requested, feedback, self.clock)
        except TerminalStateError:
            assert is_terminal(before.status)
            return
        except InvalidTransitionError:
            assert not is_terminal(before.status)
            return

        assert (before.status, requested) in EXPECTED_EDGES
        self.application = result.application
        self.history.append(self.application.status)

    @rule(role=roles)
    def request_withdrawal(self, role):
        """Rule: ask to withdraw."""
        self.clock += timedelta(minutes=5)
        try:
            result = self.lifecycle.withdraw(self.application, role, "", self.clock)
        except TransitionError:
            return

        assert role == ActorRole.CANDIDATE
        self.application = result.application
        self.history.append(self.application.status)

    @invariant()
    def status_never_moves_backwards(self):
        if self.application is None:
            return
        orders = [WORKFLOW_ORDER[s] for s in self.history]
        assert orders == sorted(orders)
        assert len(set(self.history)) == len(self.history)

    @invariant()
    def log_matches_history(self):
        if self.application is None:
            return
        assert [entry.status for entry in self.application.feedback_log] == self.history[1:]


TestApplicationLifecycleStateMachine = ApplicationLifecycleStateMachine.TestCase
TestApplicationLifecycleStateMachine.settings = settings(max_examples=50, stateful_step_count=20, deadline=None)
