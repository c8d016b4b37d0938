from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from budgetsync.domain.enums import SyncEventType
from budgetsync.domain.errors import MalformedMessageError
from budgetsync.domain.models.sync import SyncMessage
from budgetsync.logger import get_logger

RefreshCallback = Callable[[SyncEventType, dict[str, Any]], None]
Notifier = Callable[[str, str], None]


def notice_for(message: SyncMessage) -> str | None:
    """User-facing text for an inbound change, or None when nothing is shown."""
    name = message.payload.get("name")
    match message.type:
        case SyncEventType.CATEGORY_ADDED if name:
            return f'Category "{name}" was added'
        case SyncEventType.CATEGORY_DELETED if name:
            return f'Category "{name}" was removed'
        case SyncEventType.CATEGORY_UPDATED:
            return "Categories updated"
        case _:
            return None


class ViewRegistry:
    def __init__(self) -> None:
        self._callbacks: dict[str, RefreshCallback] = {}

    def register(self, view_id: str, callback: RefreshCallback) -> None:
        self._callbacks[view_id] = callback

    def get(self, view_id: str | None) -> RefreshCallback | None:
        if view_id is None:
            return None
        return self._callbacks.get(view_id)

    def views(self) -> list[str]:
        return sorted(self._callbacks)


class SyncDispatcher:
    """
    Routes inbound sync messages for one context.

    A message is only a signal: the local index is reloaded from the shared
    store, never patched from the payload. Faults from untrusted input or from
    the callbacks never reach the transport.
    """

    def __init__(
        self,
        origin_token: str,
        *,
        reload: Callable[[], None],
        views: ViewRegistry | None = None,
        current_view: Callable[[], str | None] = lambda: None,
        notifier: Notifier | None = None,
    ) -> None:
        self.origin_token = origin_token
        self._reload = reload
        self.views = views or ViewRegistry()
        self._current_view = current_view
        self._notifier = notifier
        self._logger = get_logger().bind(context_id=origin_token)

    def on_message(self, raw: str | bytes | Mapping[str, Any]) -> bool:
        try:
            message = SyncMessage.from_raw(raw)
        except MalformedMessageError as exc:
            self._logger.debug(f"dropping malformed sync message: {exc}")
            return False

        if message.origin_token == self.origin_token:
            return False

        view_id = self._current_view()
        log = self._logger.bind(view=view_id or "-")
        log.info(f"sync {message.type} from {message.origin_token}")

        try:
            self._reload()
        except Exception:
            log.opt(exception=True).warning("reload after sync message failed")
            return False

        callback = self.views.get(view_id)
        if callback is not None:
            try:
                callback(message.type, dict(message.payload))
            except Exception:
                log.opt(exception=True).warning(f"refresh for view {view_id} failed")

        text = notice_for(message)
        if text and self._notifier is not None:
            try:
                self._notifier(text, "info")
            except Exception:
                log.opt(exception=True).warning("sync notice failed")
        return True
