import pytest

from fsm import BudgetFSM, ON_TRACK, OVER, UNSET
from utils import format_currency


@pytest.mark.parametrize('budget, spent, state', [
    (0, 0, UNSET),
    (0, 250, UNSET),
    (5000, 0, ON_TRACK),
    (5000, 4999.99, ON_TRACK),
    (5000, 5000, ON_TRACK),
    (5000, 5000.01, OVER),
    (5000, 6000, OVER),
])
def test_states(budget, spent, state):
    assert BudgetFSM(budget, spent).get_state() == state


def test_over_budget_example():
    fsm = BudgetFSM(5000, 6000)
    assert fsm.get_message() == f"Over by {format_currency(1000)}"
    assert fsm.get_message() == "Over by $1,000.00"
    assert fsm.progress() == 120


def test_remaining_message_and_progress():
    fsm = BudgetFSM(5000, 1250)
    assert fsm.get_message(symbol='₸') == "₸3,750.00 remaining"
    assert fsm.progress() == 25


def test_unset_budget():
    fsm = BudgetFSM(0, 900)
    assert fsm.get_message() == "No budget set."
    assert fsm.progress() == 0


def test_progress_is_capped():
    assert BudgetFSM(100, 1000).progress() == 150
