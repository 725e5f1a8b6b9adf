from utils import format_currency

UNSET = 'Unset'
ON_TRACK = 'On track'
OVER = 'Over'

# Progress bar stops growing at 150% so a large overspend stays readable.
MAX_PROGRESS = 150.0


class BudgetFSM:
    def __init__(self, budget, total_expense):
        self.budget = float(budget or 0)
        self.total_expense = float(total_expense or 0)

    def get_state(self):
        if self.budget <= 0:
            return UNSET
        elif self.total_expense <= self.budget:
            return ON_TRACK
        else:
            return OVER

    def difference(self):
        return abs(self.budget - self.total_expense)

    def progress(self):
        if self.budget <= 0:
            return 0.0
        return min(self.total_expense / self.budget * 100, MAX_PROGRESS)

    def get_message(self, symbol='$'):
        state = self.get_state()
        if state == UNSET:
            return "No budget set."
        amount = format_currency(self.difference(), symbol)
        if state == ON_TRACK:
            return f"{amount} remaining"
        return f"Over by {amount}"
