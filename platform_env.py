import os
from dataclasses import dataclass


class EnvironmentDetector:
    """Detects runtime environment features."""

    @staticmethod
    def is_native(configured: bool = False) -> bool:
        """Return True if the app runs as an installed build with file access.

        ``REPLOG_NATIVE`` overrides the configured value when set.
        """
        flag = os.environ.get("REPLOG_NATIVE")
        if flag is not None:
            return flag in {"1", "true", "True"}
        return configured


@dataclass(frozen=True)
class Platform:
    """Capabilities the store may rely on."""

    is_native: bool
    documents_dir: str

    @classmethod
    def detect(cls, documents_dir: str, configured: bool = False) -> "Platform":
        return cls(EnvironmentDetector.is_native(configured), documents_dir)
