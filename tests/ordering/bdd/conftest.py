"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.tracking.tracking import OrderTracking
from pytest_bdd import given, parsers, then
from shared.errors import InvalidTransition


@pytest.fixture()
def error():
    """Container for captured transition errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a newly placed order's tracking", target_fixture="tracking")
def new_tracking():
    tracking = OrderTracking.start("ord-bdd-001")
    tracking._events.clear()
    return tracking


@given(parsers.cfparse('the tracking has moved to "{status}"'), target_fixture="tracking")
def tracking_moved_to(tracking, status):
    tracking.advance(status)
    tracking._events.clear()
    return tracking


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the tracking status is "{status}"'))
def tracking_status_is(tracking, status):
    assert tracking.status == status


@then(parsers.cfparse("the tracking has {count:d} completed steps"))
def tracking_has_steps(tracking, count):
    assert len(tracking.steps) == count
    assert all(step.is_completed for step in tracking.steps)


@then(parsers.cfparse('the latest step is "{title}"'))
def latest_step_is(tracking, title):
    assert tracking.ordered_steps()[-1].step == title


@then(parsers.cfparse("the current step is {index:d}"))
def current_step_is(tracking, index):
    assert tracking.current_step == index


@then("the transition is rejected")
def transition_rejected(error):
    assert isinstance(error["exc"], InvalidTransition)
