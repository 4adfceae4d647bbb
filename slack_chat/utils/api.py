"""HTTP Client for slack-chat CLI."""

import logging
import os

import httpx

from .const import API_URL_ENV_VAR, SLACK_API_URL
from .errors import SlackAPIError, TransportError

logger = logging.getLogger(__name__)


class SlackClient:
    """Synchronous Slack Web API client.

    Every method either returns the decoded response envelope (or the part
    of it the caller needs) or raises: ``SlackAPIError`` when Slack answers
    ``ok: false``, ``TransportError`` for network failures and non-2xx
    statuses.
    """

    def __init__(self, token: str, base_url: str = SLACK_API_URL, timeout: float = 60.0, transport=None):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": f"Bearer {token}"},
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._http.close()

    def call_api(self, method: str, params: dict = None, http_method: str = "POST") -> dict:
        """Call a Web API method and return the decoded envelope."""
        url = f"{self.base_url}/{method}"
        params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug(f"{http_method} {method} {sorted(params)}")

        try:
            if http_method == "GET":
                response = self._http.get(url, params=params)
            else:
                response = self._http.post(url, json=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(method, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(method, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise TransportError(method, f"invalid JSON response: {e}") from e

        if not data.get("ok"):
            error = data.get("error", "unknown_error")
            logger.debug(f"{method} returned error: {error}")
            raise SlackAPIError(method, error, data)
        return data

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    def list_channels(self, types: str, exclude_archived: bool, limit: int) -> list:
        data = self.call_api(
            "conversations.list",
            {"types": types, "exclude_archived": exclude_archived, "limit": limit},
            http_method="GET",
        )
        return data.get("channels", [])

    def get_channel_info(self, channel_id: str) -> dict:
        data = self.call_api("conversations.info", {"channel": channel_id}, http_method="GET")
        return data.get("channel", {})

    def create_channel(self, name: str, is_private: bool = False) -> dict:
        data = self.call_api("conversations.create", {"name": name, "is_private": is_private})
        return data.get("channel", {})

    def archive_channel(self, channel_id: str):
        self.call_api("conversations.archive", {"channel": channel_id})

    def unarchive_channel(self, channel_id: str):
        self.call_api("conversations.unarchive", {"channel": channel_id})

    def set_channel_topic(self, channel_id: str, topic: str):
        self.call_api("conversations.setTopic", {"channel": channel_id, "topic": topic})

    def set_channel_purpose(self, channel_id: str, purpose: str):
        self.call_api("conversations.setPurpose", {"channel": channel_id, "purpose": purpose})

    def get_history(self, channel_id: str, limit: int = 20, oldest: str = None, latest: str = None) -> list:
        data = self.call_api(
            "conversations.history",
            {"channel": channel_id, "limit": limit, "oldest": oldest, "latest": latest},
            http_method="GET",
        )
        return data.get("messages", [])

    def get_replies(self, channel_id: str, ts: str, limit: int = 100) -> list:
        """Thread parent followed by its replies, oldest first."""
        data = self.call_api(
            "conversations.replies",
            {"channel": channel_id, "ts": ts, "limit": limit},
            http_method="GET",
        )
        return data.get("messages", [])

    # ------------------------------------------------------------------
    # Auth and users
    # ------------------------------------------------------------------

    def auth_test(self) -> dict:
        """Check the token; returns the team and user it belongs to."""
        return self.call_api("auth.test")

    def get_user_info(self, user_id: str) -> dict:
        data = self.call_api("users.info", {"user": user_id}, http_method="GET")
        return data.get("user", {})

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def send_message(self, channel_id: str, text: str = None, thread_ts: str = None,
                     blocks: list = None, unfurl: bool = True) -> dict:
        params = {
            "channel": channel_id,
            "text": text,
            "thread_ts": thread_ts,
            "blocks": blocks,
            "unfurl_links": unfurl,
            "unfurl_media": unfurl,
        }
        return self.call_api("chat.postMessage", params)

    def update_message(self, channel_id: str, ts: str, text: str = None, blocks: list = None,
                       unfurl: bool = True) -> dict:
        params = {
            "channel": channel_id,
            "ts": ts,
            "text": text,
            "blocks": blocks,
            "unfurl_links": unfurl,
            "unfurl_media": unfurl,
        }
        return self.call_api("chat.update", params)

    def delete_message(self, channel_id: str, ts: str) -> dict:
        return self.call_api("chat.delete", {"channel": channel_id, "ts": ts})

    def add_reaction(self, channel_id: str, ts: str, name: str):
        self.call_api("reactions.add", {"channel": channel_id, "timestamp": ts, "name": name})

    def remove_reaction(self, channel_id: str, ts: str, name: str):
        self.call_api("reactions.remove", {"channel": channel_id, "timestamp": ts, "name": name})

    # ------------------------------------------------------------------
    # Files (external upload flow)
    # ------------------------------------------------------------------

    def get_upload_url_external(self, filename: str, length: int) -> dict:
        """Request an upload slot. Returns {"upload_url": ..., "file_id": ...}."""
        data = self.call_api(
            "files.getUploadURLExternal",
            {"filename": filename, "length": length},
            http_method="GET",
        )
        return {"upload_url": data.get("upload_url"), "file_id": data.get("file_id")}

    def upload_file_to_url(self, upload_url: str, filename: str, stream):
        """POST raw file bytes to an upload URL (no JSON envelope).

        The URL is pre-signed by Slack, so the bearer token is not sent.
        """
        logger.debug(f"POST {filename} to upload URL")
        try:
            request = self._http.build_request(
                "POST",
                upload_url,
                content=stream.read(),
                headers={"Content-Type": "application/octet-stream"},
            )
            del request.headers["Authorization"]
            response = self._http.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError("upload URL", f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError("upload URL", str(e) or type(e).__name__) from e

    def complete_upload_external(self, files: list, channel_id: str, thread_ts: str = None,
                                 initial_comment: str = None) -> dict:
        params = {
            "files": files,
            "channel_id": channel_id,
            "thread_ts": thread_ts,
            "initial_comment": initial_comment or None,
        }
        return self.call_api("files.completeUploadExternal", params)


def get_api_url() -> str:
    return os.environ.get(API_URL_ENV_VAR) or SLACK_API_URL


def get_client(token: str = None) -> SlackClient:
    """Create a Slack client from the configured token."""
    if token is None:
        from ..config import get_token

        token = get_token()
    return SlackClient(token, base_url=get_api_url())
