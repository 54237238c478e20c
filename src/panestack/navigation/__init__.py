"""Navigation — the view stack state machine and its history store."""
