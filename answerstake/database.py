"""Durable storage for the ledger snapshot."""

from typing import Optional

from supabase import create_client, Client

from answerstake.config import Settings, get_settings
from answerstake.logging_config import StructuredLogger
from answerstake.models.ledger import LedgerState

logger = StructuredLogger(__name__)

_supabase_client: Client | None = None


def get_supabase(settings: Optional[Settings] = None) -> Client:
    """Get Supabase client instance."""
    global _supabase_client

    if _supabase_client is None:
        settings = settings or get_settings()
        _supabase_client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

    return _supabase_client


class LedgerStore:
    """Loads and saves the full ledger state."""

    def load(self) -> Optional[LedgerState]:
        raise NotImplementedError

    def save(self, state: LedgerState):
        raise NotImplementedError


class MemoryLedgerStore(LedgerStore):
    """Keeps the last saved snapshot in process. Used when Supabase is unset."""

    def __init__(self, initial: Optional[LedgerState] = None):
        self._payload = initial.model_dump(mode="json") if initial is not None else None

    def load(self) -> Optional[LedgerState]:
        if self._payload is None:
            return None
        return LedgerState.model_validate(self._payload)

    def save(self, state: LedgerState):
        self._payload = state.model_dump(mode="json")


class SupabaseLedgerStore(LedgerStore):
    """Stores the snapshot as a single JSON row: ``{"id": row_id, "state": {...}}``."""

    def __init__(self, client: Client, table: str = "ledger_state", row_id: int = 1):
        self.client = client
        self.table = table
        self.row_id = row_id

    def load(self) -> Optional[LedgerState]:
        result = self.client.table(self.table).select("state").eq(
            "id", self.row_id
        ).execute()

        if not result.data:
            logger.info("no stored ledger state", table=self.table, row_id=self.row_id)
            return None

        return LedgerState.model_validate(result.data[0]["state"])

    def save(self, state: LedgerState):
        result = self.client.table(self.table).upsert({
            "id": self.row_id,
            "state": state.model_dump(mode="json"),
        }).execute()

        if not result.data:
            raise RuntimeError(
                f"Failed to persist ledger state to {self.table}/{self.row_id}"
            )


def get_ledger_store(settings: Optional[Settings] = None) -> LedgerStore:
    """Supabase-backed store when configured, in-memory otherwise."""
    settings = settings or get_settings()

    if settings.supabase_configured:
        return SupabaseLedgerStore(
            get_supabase(settings),
            table=settings.ledger_state_table,
            row_id=settings.ledger_state_row_id,
        )

    logger.warning("supabase not configured, ledger state is kept in memory")
    return MemoryLedgerStore()
