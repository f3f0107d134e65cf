"""
Confirmation Dialog

Streamlit implementation of the confirmation collaborator used by the row
set and the pages. Streamlit cannot block on a modal, so confirmation takes
two passes:

1. The action runs through DialogConfirmation.run(); its confirm(message)
   call finds no acceptance, records the message as pending and returns
   False, leaving everything unchanged.
2. render() shows the pending message in st.dialog. "Yes" stores the
   acceptance and replays the action, whose confirm(message) now returns
   True. "No" discards the pending request.
"""

from typing import Any, Callable

import streamlit as st

from state.session_state import scoped_key, ss_clear, ss_get, ss_set


class DialogConfirmation:
    """Callable confirm(message) -> bool backed by session state.

    Args:
        scope: Form/page scope so separate pages never share a pending request
    """

    def __init__(self, scope: str):
        self.scope = scope
        self._pending_key = scoped_key(scope, "confirm", "pending")
        self._accepted_key = scoped_key(scope, "confirm", "accepted")
        self._action_key = scoped_key(scope, "confirm", "action")

    def __call__(self, message: str) -> bool:
        if ss_get(self._accepted_key) == message:
            ss_clear(self._accepted_key)
            return True
        ss_set(self._pending_key, message)
        return False

    @property
    def pending_message(self):
        return ss_get(self._pending_key)

    def run(self, action: Callable[[], Any]) -> Any:
        """Run an action that may ask for confirmation; keep it for replay if it did."""
        ss_set(self._action_key, action)
        result = action()
        if self.pending_message is None:
            ss_clear(self._action_key)
        return result

    def accept(self) -> Any:
        """Accept the pending request and replay its action."""
        message = self.pending_message
        action = ss_get(self._action_key)
        ss_clear(self._pending_key, self._action_key)
        if message is None or action is None:
            return None
        ss_set(self._accepted_key, message)
        try:
            return action()
        finally:
            ss_clear(self._accepted_key)

    def reject(self) -> None:
        ss_clear(self._pending_key, self._action_key, self._accepted_key)

    def render(self) -> None:
        """Show the dialog when a confirmation is pending."""
        message = self.pending_message
        if message is None:
            return

        @st.dialog("Confirmation")
        def _dialog():
            st.markdown(f":warning: {message}")
            yes_col, no_col = st.columns(2)
            if yes_col.button("Yes", type="primary", use_container_width=True, key=scoped_key(self.scope, "confirm", "yes")):
                self.accept()
                st.rerun()
            if no_col.button("No", use_container_width=True, key=scoped_key(self.scope, "confirm", "no")):
                self.reject()
                st.rerun()

        _dialog()


def get_confirmation(scope: str) -> DialogConfirmation:
    """Return the confirmation collaborator for a scope."""
    return DialogConfirmation(scope)
