class TransitionNotFoundError(LookupError):
    """Raised when a transition id does not resolve to a stored transition."""

    def __init__(self, transition_id: int):
        self.transition_id = transition_id
        super().__init__(f"Transition {transition_id} not found")
