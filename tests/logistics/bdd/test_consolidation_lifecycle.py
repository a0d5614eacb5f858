"""BDD tests for the consolidation lifecycle."""

from pytest_bdd import parsers, scenarios, then, when

from logistics.shared.errors import InvalidStateError

scenarios("features/consolidation_lifecycle.feature")


@when(
    parsers.cfparse('the consolidation is moved to "{status}" with note "{note}"'),
    target_fixture="consolidation",
)
def move_consolidation(consolidation, status, note):
    consolidation.transition_to(status, note=note)
    return consolidation


@when(parsers.cfparse('driver "{driver_id}" is assigned'), target_fixture="consolidation")
def assign_driver(consolidation, driver_id):
    consolidation.assign_driver(driver_id)
    return consolidation


@when(
    parsers.cfparse('moving the consolidation to "{status}" is attempted'),
    target_fixture="consolidation",
)
def attempt_move(consolidation, status, error):
    try:
        consolidation.transition_to(status)
    except InvalidStateError as exc:
        error["exc"] = exc
    return consolidation


@then("the transition is refused")
def transition_refused(error):
    assert isinstance(error["exc"], InvalidStateError)


@then(parsers.cfparse('the latest history note is "{note}"'))
def latest_note(consolidation, note):
    assert consolidation.latest_history_entry().note == note
