"""
emerge.config — Settings read from the environment.

Read once at import time.  Tests override attributes on the module-level
`settings` instance.
"""

import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


LIST_KEY_POLICIES = ("dict", "error")


class Settings:
    """Library settings from environment variables."""

    # What happens when a list is addressed by a key that is not a natural
    # index: "dict" replaces the list with a dict keyed by that key,
    # "error" raises ValidationError.
    LIST_KEY_POLICY: str = os.environ.get("EMERGE_LIST_KEY_POLICY", "dict")

    # Log a warning whenever the "dict" policy discards a list.
    LOG_LIST_DISCARD: bool = _env_flag("EMERGE_LOG_LIST_DISCARD", True)

    @property
    def strict_list_keys(self) -> bool:
        if self.LIST_KEY_POLICY not in LIST_KEY_POLICIES:
            raise ValueError(
                f"EMERGE_LIST_KEY_POLICY must be one of {LIST_KEY_POLICIES}, "
                f"got {self.LIST_KEY_POLICY!r}"
            )
        return self.LIST_KEY_POLICY == "error"


settings = Settings()
