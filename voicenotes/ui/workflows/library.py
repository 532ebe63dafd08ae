"""Loading the recording list from the backend and keeping its signed URLs usable."""

import logging

from voicenotes.ui.api_client import APIClient, APIError
from voicenotes.ui.state import PageState, RecordingView

logger = logging.getLogger(__name__)


def load_recordings(page: PageState, api: APIClient) -> list[RecordingView]:
    """Fetch recordings newest first and replace the displayed list.

    Playback references of entries that are replaced are released.  On
    failure the current list is kept and the error shown.
    """
    page.is_loading = True
    try:
        data = api.list_recordings()
    except APIError as exc:
        logger.error("Failed to load recordings: %s", exc.message)
        page.set_error(f"Failed to load recordings: {exc.message}")
        return page.recordings
    finally:
        page.is_loading = False

    signed_at = page.clock()
    page.replace_recordings([RecordingView.from_api(r, signed_at=signed_at) for r in data])
    return page.recordings


def refresh_audio_url(page: PageState, api: APIClient, recording_id: str) -> str | None:
    """Ask for a new signed URL for one recording; ``None`` means retry later."""
    try:
        url = api.get_audio_url(recording_id)
    except APIError as exc:
        logger.warning("Audio URL for %s still unavailable: %s", recording_id, exc.message)
        page.set_error(exc.message)
        return None
    page.set_audio_url(recording_id, url)
    return url


def current_audio_url(page: PageState, api: APIClient, recording: RecordingView) -> str | None:
    """Playback URL for *recording*, re-signing a remote one that has aged out.

    A missing URL is left for the user to retry explicitly.
    """
    if recording.local_url:
        return recording.local_url
    if recording.audio_url and page.audio_url_expired(recording):
        logger.info("Signed URL for %s expired; requesting a new one", recording.id)
        return refresh_audio_url(page, api, recording.id)
    return recording.audio_url
