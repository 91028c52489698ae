"""
YouTube Data API client for autoyt.

Authorization uses the OAuth installed-app flow: the first upload opens a
browser on the Google consent page and receives the answer on
http://localhost:8090. The resulting token is cached in
<root>/.credentials/youtube.json (readable by the owner only) and refreshed
automatically once expired.

The client secret is the "Desktop app" OAuth client JSON downloaded from
the Google Cloud console, configured as paths.client_secret.
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload

from autoyt.core.exceptions import UploadError
from autoyt.core.logger import get_logger

logger = get_logger(__name__)


SCOPES = ["https://www.googleapis.com/auth/youtube.upload"]

OAUTH_REDIRECT_PORT = 8090

TOKEN_DIRNAME = ".credentials"
TOKEN_FILENAME = "youtube.json"

# The API rejects publish times without the subsecond part
PUBLISH_AT_FORMAT = "%Y-%m-%dT%H:%M:%S.000Z"

UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024


def format_publish_at(publish_at: datetime) -> str:
    return publish_at.astimezone(timezone.utc).strftime(PUBLISH_AT_FORMAT)


def build_upload_body(
    title: str,
    description: str,
    tags: list[str],
    privacy: str,
    category_id: str,
    publish_at: datetime | None,
) -> dict[str, Any]:
    """
    Build the videos.insert request body.

    A scheduled video must be private until its publish time, so privacy
    is forced to "private" whenever publish_at is given. Empty tag lists
    are left out since the API answers them with 400 Bad Request.
    """
    body: dict[str, Any] = {
        "snippet": {
            "title": title,
            "description": description,
            "categoryId": category_id,
        },
        "status": {"privacyStatus": privacy},
    }
    if tags:
        body["snippet"]["tags"] = list(tags)
    if publish_at is not None:
        body["status"]["privacyStatus"] = "private"
        body["status"]["publishAt"] = format_publish_at(publish_at)
    return body


class YouTubeClient:
    """
    Uploads videos to the authorized YouTube channel.

    Attributes:
        client_secret: OAuth client secret file.
        root_dir: autoyt root directory holding the token cache.

    Example:
        client = YouTubeClient(config.paths.client_secret, config.paths.root)
        video_id = client.upload(Path("video.mp4"), "A - Song", "...", [], "public", "10", None)
    """

    def __init__(self, client_secret: Path, root_dir: Path, service: Any = None) -> None:
        self.client_secret = client_secret
        self.root_dir = root_dir
        self._service = service

    @property
    def token_file(self) -> Path:
        return self.root_dir / TOKEN_DIRNAME / TOKEN_FILENAME

    @property
    def service(self) -> Any:
        """The YouTube API resource, authorized on first access."""
        if self._service is None:
            credentials = self._credentials()
            self._service = build("youtube", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    def _credentials(self) -> Credentials:
        """
        Load cached credentials, refreshing or authorizing as needed.

        Raises:
            UploadError: If the client secret is missing or authorization fails.
        """
        credentials = None
        try:
            if self.token_file.exists():
                credentials = Credentials.from_authorized_user_file(str(self.token_file), SCOPES)

            if credentials and credentials.valid:
                return credentials

            if credentials and credentials.expired and credentials.refresh_token:
                logger.debug("Refreshing YouTube token")
                credentials.refresh(Request())
            else:
                credentials = self._authorize()
        except (GoogleAuthError, ValueError) as e:
            raise UploadError(
                f"Unable to authorize YouTube access ({e}).",
                details={"token_file": str(self.token_file), "original_error": str(e)}
            ) from e

        self._save_token(credentials)
        return credentials

    def _authorize(self) -> Credentials:
        if not self.client_secret.exists():
            raise UploadError(
                f"Unable to read client secret '{self.client_secret}'.",
                details={"client_secret": str(self.client_secret)}
            )
        logger.info("upload: authorization required, opening the browser")
        flow = InstalledAppFlow.from_client_secrets_file(str(self.client_secret), SCOPES)
        return flow.run_local_server(port=OAUTH_REDIRECT_PORT)

    def _save_token(self, credentials: Credentials) -> None:
        try:
            self.token_file.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd = os.open(self.token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(credentials.to_json())
        except OSError as e:
            raise UploadError(
                f"Unable to cache oauth token ({e}).",
                details={"token_file": str(self.token_file), "original_error": str(e)}
            ) from e

    def upload(
        self,
        video_file: Path,
        title: str,
        description: str,
        tags: list[str],
        privacy: str,
        category_id: str,
        publish_at: datetime | None,
    ) -> str:
        """
        Upload a video file.

        Returns:
            The YouTube video id.

        Raises:
            UploadError: If the file cannot be read, authorization fails or
                         the API rejects the upload.
        """
        if not video_file.exists():
            raise UploadError(
                f"Unable to open {video_file}.",
                details={"path": str(video_file)}
            )

        body = build_upload_body(title, description, tags, privacy, category_id, publish_at)
        media = MediaFileUpload(str(video_file), chunksize=UPLOAD_CHUNK_SIZE, resumable=True)

        try:
            request = self.service.videos().insert(part="snippet,status", body=body, media_body=media)
            response = None
            while response is None:
                status, response = request.next_chunk()
                if status:
                    logger.debug(f"Uploaded {status.progress() * 100:.1f}% of {video_file}")
        except (HttpError, GoogleAuthError, OSError) as e:
            raise UploadError(
                f"Failed to upload {video_file} ({e}).",
                details={"path": str(video_file), "title": title, "original_error": str(e)}
            ) from e

        video_id = response.get("id")
        if not video_id:
            raise UploadError(
                f"No video id returned for {video_file}.",
                details={"path": str(video_file), "response": response}
            )
        return str(video_id)
