"""
Exceptions raised by the Ratioed analysis engine
"""


class InsufficientDataError(ValueError):
    """Fewer parseable messages than the chosen mode needs."""

    def __init__(self, found: int, required: int, mode: str = "one_on_one"):
        self.found = found
        self.required = required
        self.mode = mode
        if mode == "group":
            what = "the group chat"
        else:
            what = "the text"
        super().__init__(
            f"Could not parse enough messages from {what} "
            f"(found {found}, need at least {required}). Please check the format."
        )
