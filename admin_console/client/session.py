import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SessionHolder:
    """
    Owns the access token for one console session.

    The token is set at login and cleared at logout or when the API rejects
    it. With a `path` the token is mirrored to a JSON file so it outlives the
    process; without one it lives in memory only.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path).expanduser() if path else None
        self._token: str | None = None
        if self.path and self.path.exists():
            self._token = self._read()

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def set(self, token: str) -> None:
        self._token = token
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # owner-only before the token is written
            self.path.touch(mode=0o600)
            self.path.chmod(0o600)
            self.path.write_text(json.dumps({"accessToken": token}), encoding="utf-8")

    def clear(self) -> None:
        self._token = None
        if self.path and self.path.exists():
            self.path.unlink()

    def _read(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        token = data.get("accessToken") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None
