from abc import ABC, abstractmethod


class AbstractBundleSource(ABC):
    """Interface for collaborators that produce the compiled client bundle."""

    media_type = "application/javascript"

    @abstractmethod
    async def fetch(self) -> bytes:
        """Return the current compiled bundle.

        Returns:
            bytes: JavaScript source ready to serve.

        Raises:
            AssetReadAppError: If a local bundle cannot be read.
            BundleAppError: If an external bundler fails.
        """
        ...
