"""
Failed-callback recovery: list, retry and delete failed deliveries.

Each item tracks its own retry/delete progress and the bulk action tracks
its own, so overlapping operations never share a flag. The selection only
ever holds ids from the last successful fetch.
"""

from dataclasses import dataclass, replace

from consumer_console.api_schemas import FailedCallback
from consumer_console.enums import BulkAction
from consumer_console.exceptions import FetchError, NoSelectionError
from consumer_console.logging import LogEventType, get_logger
from consumer_console.rest_client import BackendClient

logger = get_logger(__name__)

CallbackId = int | str


@dataclass
class ItemLoadingState:
    retrying: bool = False
    deleting: bool = False

    @property
    def idle(self) -> bool:
        return not (self.retrying or self.deleting)


class FailedCallbackRecovery:
    """Operator-side state and actions for the failed callbacks list."""

    def __init__(self, client: BackendClient):
        self._client = client
        self.items: list[FailedCallback] = []
        self.selected: set[CallbackId] = set()
        self.bulk_loading = False
        self._loading: dict[str, ItemLoadingState] = {}
        self._issued_seq = 0
        self._applied_seq = 0

    # === Listing ===

    def _known_ids(self) -> set[CallbackId]:
        return {item.id for item in self.items}

    async def fetch(self) -> list[FailedCallback]:
        """
        Replace the item list with the backend's current records.

        Fetches are numbered when issued; a response that arrives after a
        later-issued fetch was applied is dropped, and the selection is only
        pruned against the list actually applied.

        Raises:
            FetchError: The list could not be loaded; items are left as they were
        """
        self._issued_seq += 1
        seq = self._issued_seq
        try:
            items = await self._client.get_failed_callbacks()
        except Exception as e:
            logger.error(
                "Error fetching failed callbacks",
                event_type=LogEventType.CALLBACK_FETCH,
                error=str(e),
            )
            raise FetchError("failed callbacks", e) from e

        if seq <= self._applied_seq:
            logger.debug(
                "Discarding stale failed callbacks list",
                event_type=LogEventType.CALLBACK_FETCH,
                seq=seq,
                applied_seq=self._applied_seq,
            )
            return list(self.items)

        self._applied_seq = seq
        self.items = items
        self.selected &= self._known_ids()
        logger.debug(
            "Failed callbacks fetched",
            event_type=LogEventType.CALLBACK_FETCH,
            seq=seq,
            count=len(items),
        )
        return list(self.items)

    async def _fetch_quietly(self) -> None:
        try:
            await self.fetch()
        except FetchError:
            # Already logged; the previous list stays on screen
            pass

    # === Selection ===

    def _resolve(self, item_id: CallbackId) -> CallbackId | None:
        # Ids are matched by their string form, so "1" selects item 1
        for item in self.items:
            if str(item.id) == str(item_id):
                return item.id
        return None

    def select(self, item_id: CallbackId) -> bool:
        resolved = self._resolve(item_id)
        if resolved is None:
            return False
        self.selected.add(resolved)
        return True

    def deselect(self, item_id: CallbackId) -> None:
        self.selected = {i for i in self.selected if str(i) != str(item_id)}

    def set_selection(self, ids) -> None:
        resolved = (self._resolve(item_id) for item_id in ids)
        self.selected = {item_id for item_id in resolved if item_id is not None}

    def select_all(self) -> None:
        self.selected = self._known_ids()

    def clear_selection(self) -> None:
        self.selected.clear()

    # === Per-item actions ===

    def loading_state(self, item_id: CallbackId) -> ItemLoadingState:
        """Progress flags for one item.

        Only in-flight items are tracked, so ids that vanish from the list on
        refresh leave nothing behind once their call settles.
        """
        state = self._loading.get(str(item_id))
        return replace(state) if state else ItemLoadingState()

    def _set_flag(self, item_id: CallbackId, flag: str, value: bool) -> None:
        state = self._loading.setdefault(str(item_id), ItemLoadingState())
        setattr(state, flag, value)
        if state.idle:
            del self._loading[str(item_id)]

    async def _run_item_action(
        self, item_id: CallbackId, flag: str, call, event_type: LogEventType
    ) -> bool:
        if getattr(self.loading_state(item_id), flag):
            logger.info(
                "Action already in progress",
                event_type=event_type,
                item_id=item_id,
            )
            return False

        self._set_flag(item_id, flag, True)
        try:
            await call(item_id)
        except Exception as e:
            logger.error(
                "Failed callback action failed",
                event_type=event_type,
                item_id=item_id,
                error=str(e),
            )
            return False
        finally:
            self._set_flag(item_id, flag, False)

        logger.info(
            "Failed callback action accepted", event_type=event_type, item_id=item_id
        )
        await self._fetch_quietly()
        return True

    async def retry_one(self, item_id: CallbackId) -> bool:
        """Ask the backend to redeliver one failed callback."""
        return await self._run_item_action(
            item_id,
            "retrying",
            self._client.retry_failed_callback,
            LogEventType.CALLBACK_RETRY,
        )

    async def delete_one(self, item_id: CallbackId) -> bool:
        """Delete one failed callback; the operator must already have confirmed."""
        return await self._run_item_action(
            item_id,
            "deleting",
            self._client.delete_failed_callback,
            LogEventType.CALLBACK_DELETE,
        )

    # === Bulk actions ===

    async def bulk_action(self, action: BulkAction | str) -> bool:
        """
        Apply ``action`` to every selected item in one request.

        The batch is all-or-nothing from the client's point of view: the
        selection is cleared and the list re-fetched whatever the outcome.

        Raises:
            NoSelectionError: Nothing is selected; no request is made
        """
        action = BulkAction(action)
        if not self.selected:
            raise NoSelectionError(action.value)
        if self.bulk_loading:
            logger.info(
                "Bulk action already in progress",
                event_type=LogEventType.CALLBACK_BULK,
                action=action.value,
            )
            return False

        ids = sorted(self.selected, key=str)
        self.bulk_loading = True
        succeeded = False
        try:
            await self._client.bulk_failed_callbacks(ids, action)
            succeeded = True
            logger.info(
                "Bulk action accepted",
                event_type=LogEventType.CALLBACK_BULK,
                action=action.value,
                count=len(ids),
            )
        except Exception as e:
            logger.error(
                "Bulk action failed",
                event_type=LogEventType.CALLBACK_BULK,
                action=action.value,
                count=len(ids),
                error=str(e),
            )
        finally:
            self.bulk_loading = False
            self.selected.clear()

        await self._fetch_quietly()
        return succeeded
