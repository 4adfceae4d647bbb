"""
File uploads via Slack's external upload flow.

For each file, in order: stat it, request an upload slot
(files.getUploadURLExternal), and POST its bytes to the slot URL. Once every
file is uploaded, a single files.completeUploadExternal call shares them all
to the channel. If that last call fails the uploaded bytes are left as-is;
Slack offers no way to release an unused slot.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

from .utils.errors import (
    FileTransferFailed,
    FileUnreadable,
    SlackAPIError,
    TransportError,
    UploadFinalizeFailed,
    UploadSlotRequestFailed,
    wrap_error,
)

logger = logging.getLogger(__name__)


@dataclass
class UploadUnit:
    path: str
    title: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)


@dataclass
class UploadedFile:
    id: str
    title: str

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title}


def upload_units(paths: List[str], title: str = None) -> List[UploadUnit]:
    """Pair each path with its title: the explicit title, else the base name."""
    return [UploadUnit(path, title or os.path.basename(path)) for path in paths]


def upload_one(client, unit: UploadUnit, progress: Callable = None) -> UploadedFile:
    try:
        size = os.stat(unit.path).st_size
    except OSError as e:
        raise FileUnreadable(unit.path, e.strerror or str(e))

    if progress:
        progress(unit.filename, size)

    try:
        slot = client.get_upload_url_external(unit.filename, size)
    except (SlackAPIError, TransportError) as e:
        raise wrap_error("get upload URL", e, UploadSlotRequestFailed) from e
    logger.debug(f"Got upload slot {slot['file_id']} for {unit.filename}")

    try:
        with open(unit.path, "rb") as f:
            client.upload_file_to_url(slot["upload_url"], unit.filename, f)
    except OSError as e:
        raise FileUnreadable(unit.path, e.strerror or str(e))
    except (SlackAPIError, TransportError) as e:
        raise wrap_error("upload file", e, FileTransferFailed) from e

    return UploadedFile(slot["file_id"], unit.title)


def upload_and_share(
    client,
    channel_id: str,
    files: List[str],
    text: str = None,
    title: str = None,
    thread_ts: str = None,
    progress: Optional[Callable[[str, int], None]] = None,
) -> List[UploadedFile]:
    """Upload files one at a time, then share them all in one call.

    The first unreadable path aborts the batch before any later file is
    touched, and no completion call is made.
    """
    uploaded = []
    for unit in upload_units(files, title):
        uploaded.append(upload_one(client, unit, progress))

    try:
        client.complete_upload_external(
            [f.to_dict() for f in uploaded],
            channel_id,
            thread_ts=thread_ts,
            initial_comment=text,
        )
    except (SlackAPIError, TransportError) as e:
        raise wrap_error("complete upload", e, UploadFinalizeFailed) from e

    logger.info(f"Shared {len(uploaded)} file(s) to {channel_id}")
    return uploaded
