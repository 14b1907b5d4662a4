from __future__ import annotations

from pathlib import Path
from typing import Dict

import yaml


DEFAULT_MESSAGES_PATH = Path(__file__).resolve().parent.parent / "messages.yaml"

REQUIRED_KEYS = (
    "progress.title.download",
    "progress.title.run.tasks",
    "progress.title.run.tests",
    "progress.title.configure.projects",
    "progress.title.build",
    "progress.title.build.model",
)


class BundleError(ValueError):
    pass


class MessageBundle:
    """
    Localized progress titles, loaded from a flat YAML mapping of key -> template.
    Templates use positional placeholders: "Downloading {0}".
    """

    def __init__(self, messages: Dict[str, str]):
        missing = [k for k in REQUIRED_KEYS if k not in messages]
        if missing:
            raise BundleError(f"Message bundle is missing keys: {', '.join(missing)}")
        self._messages = dict(messages)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "MessageBundle":
        p = Path(path) if path is not None else DEFAULT_MESSAGES_PATH
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise BundleError(f"Cannot read message bundle {p}: {e}") from e
        except yaml.YAMLError as e:
            raise BundleError(f"Invalid message bundle {p}: {e}") from e

        if not isinstance(raw, dict):
            raise BundleError(f"Message bundle {p} must be a mapping of key -> text")
        return cls({str(k): str(v) for k, v in raw.items()})

    def message(self, key: str, *args: object) -> str:
        try:
            template = self._messages[key]
        except KeyError:
            raise BundleError(f"Unknown message key '{key}'") from None
        return template.format(*args)

    def __call__(self, key: str, *args: object) -> str:
        return self.message(key, *args)
