"""Supabase-backed session store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from sticker_converter.domain.stickers import (
    ImageSubmission,
    PendingStatus,
    Placement,
    SessionState,
)
from sticker_converter.services.sessions import SessionStore

_TABLE = "sticker_sessions"


@dataclass
class SupabaseSessionStore(SessionStore):
    """Supabase implementation for per-user session state."""

    client: Client

    def get(self, user_id: int) -> SessionState:
        """Return the stored state, or the initial state for new users."""
        response = (
            self.client.table(_TABLE)
            .select("telegram_user_id, stored_placement, status, pending_request")
            .eq("telegram_user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return SessionState()
        row = response.data[0]
        placement = row.get("stored_placement")
        return SessionState(
            stored_placement=Placement(placement) if placement else None,
            pending_request=_submission_from_row(row.get("pending_request")),
            status=PendingStatus(row.get("status") or PendingStatus.NONE.value),
        )

    def put(self, user_id: int, state: SessionState) -> None:
        """Insert or replace the state row for a user."""
        self.client.table(_TABLE).upsert(
            {
                "telegram_user_id": user_id,
                "stored_placement": (
                    state.stored_placement.value if state.stored_placement else None
                ),
                "status": state.status.value,
                "pending_request": _submission_to_row(state.pending_request),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="telegram_user_id",
        ).execute()


def _submission_to_row(submission: ImageSubmission | None) -> dict | None:
    if submission is None:
        return None
    return {
        "file_id": submission.file_id,
        "mime_type": submission.mime_type,
        "byte_size": submission.byte_size,
        "file_name": submission.file_name,
        "received_at": submission.received_at.isoformat(),
    }


def _submission_from_row(row: dict | None) -> ImageSubmission | None:
    if not row:
        return None
    return ImageSubmission(
        file_id=row["file_id"],
        mime_type=row["mime_type"],
        byte_size=int(row["byte_size"]),
        file_name=row.get("file_name"),
        received_at=datetime.fromisoformat(row["received_at"]),
    )
