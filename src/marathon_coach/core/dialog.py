"""
Single-slot message dialog with a confirmation sub-machine.

A plain message offers one dismiss action ("Close").  A confirmation
swaps that for a confirm action ("Yes, Delete") plus a cancel action.

Confirmation states:

    idle ──raise_confirmation──▶ pending(on_confirm, on_cancel)
    pending ──confirm──▶ idle   (runs on_confirm, dismiss label restored)
    pending ──cancel───▶ idle   (runs on_cancel, dismiss label restored)

Raising a confirmation while one is pending first restores the plain
dismiss action, so there is never more than one confirm handler or
cancel action at a time.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from .config import CANCEL_LABEL, CONFIRM_DELETE_LABEL, DISMISS_LABEL

Handler = Callable[[], None]


@dataclass
class DialogAction:
    """A button on the dialog."""

    label: str
    handler: Handler


@dataclass
class Dialog:
    """What the presentation layer should currently display."""

    title: str
    message: str
    actions: list[DialogAction] = field(default_factory=list)

    def labels(self) -> list[str]:
        return [a.label for a in self.actions]


@dataclass
class Idle:
    pass


@dataclass
class Pending:
    on_confirm: Handler
    on_cancel: Handler


ConfirmationState = Idle | Pending


class ConfirmationFlow:
    """
    Owns the dialog slot and the confirmation sub-machine.

    Only one dialog is visible at a time; showing a new one replaces the old.
    """

    def __init__(self) -> None:
        self.dialog: Dialog | None = None
        self.state: ConfirmationState = Idle()
        self._on_dismiss: Handler | None = None

    @property
    def is_open(self) -> bool:
        return self.dialog is not None

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, Pending)

    def _restore(self) -> None:
        """Leave pending: drop the confirm/cancel handlers."""
        self.state = Idle()

    def _dismiss_action(self) -> DialogAction:
        return DialogAction(DISMISS_LABEL, self.dismiss)

    def show_message(self, title: str, message: str, on_dismiss: Handler | None = None) -> Dialog:
        """
        Show a plain message with a single dismiss action.

        Args:
            title: Dialog title
            message: Body text
            on_dismiss: Runs after the dialog closes (e.g. navigation)

        Returns:
            The dialog now displayed
        """
        self._restore()
        self._on_dismiss = on_dismiss
        self.dialog = Dialog(title, message, [self._dismiss_action()])
        return self.dialog

    def dismiss(self) -> None:
        """Close a plain message and run its on_dismiss callback, if any."""
        if self.is_pending:
            raise RuntimeError("A confirmation is pending; confirm or cancel it")
        callback = self._on_dismiss
        self._on_dismiss = None
        self.dialog = None
        if callback is not None:
            callback()

    def raise_confirmation(
        self,
        title: str,
        message: str,
        on_confirm: Handler,
        on_cancel: Handler,
        confirm_label: str = CONFIRM_DELETE_LABEL,
    ) -> Dialog:
        """
        Ask the user to confirm a destructive action.

        Any pending confirmation is fully restored first.

        Returns:
            The dialog now displayed
        """
        if self.is_pending:
            self._restore()
        self._on_dismiss = None
        self.state = Pending(on_confirm=on_confirm, on_cancel=on_cancel)
        self.dialog = Dialog(
            title,
            message,
            [
                DialogAction(confirm_label, self.confirm),
                DialogAction(CANCEL_LABEL, self.cancel),
            ],
        )
        return self.dialog

    def confirm(self) -> None:
        """Run the pending action; its handler typically shows an acknowledgement."""
        state = self.state
        if not isinstance(state, Pending):
            raise RuntimeError("No confirmation is pending")
        self._restore()
        self.dialog = None
        state.on_confirm()

    def cancel(self) -> None:
        """Abandon the pending action without running it."""
        state = self.state
        if not isinstance(state, Pending):
            raise RuntimeError("No confirmation is pending")
        self._restore()
        self.dialog = None
        state.on_cancel()

    def activate(self, label: str) -> None:
        """Press the dialog action with the given label."""
        if self.dialog is None:
            raise RuntimeError("No dialog is open")
        for action in self.dialog.actions:
            if action.label == label:
                action.handler()
                return
        raise KeyError(f"No dialog action labelled {label!r}")
