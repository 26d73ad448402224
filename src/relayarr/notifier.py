"""Notification module for relayarr using Apprise."""

from collections.abc import Sequence

import apprise

from . import logger


class Notifier:
    """Push notification handler using Apprise."""

    def __init__(self, urls: list[str]):
        """Initialize the notifier with Apprise URLs.

        Args:
            urls: List of Apprise notification URLs.

        Raises:
            ValueError: If any URL is invalid.
        """
        self.apprise = apprise.Apprise()

        for url in urls:
            if not self.apprise.add(url):
                raise ValueError(
                    f"Invalid notification URL: {logger.redact_url_password(url)}"
                )
            logger.debug("Added notification URL: %s", logger.redact_url_password(url))

        logger.info(
            "Notifier initialized with %d notification service(s)", len(self.apprise)
        )

    async def notify(
        self,
        title: str,
        body: str,
        notify_type: apprise.NotifyType = apprise.NotifyType.INFO,
    ) -> bool:
        """Send notification to all configured services.

        Args:
            title: Notification title.
            body: Notification body/message.
            notify_type: Type of notification (INFO, SUCCESS, WARNING, FAILURE).

        Returns:
            True if at least one notification was sent successfully.
        """
        try:
            result = await self.apprise.async_notify(
                title=title,
                body=body,
                notify_type=notify_type,
            )
            if result:
                logger.debug("Notification sent: %s", title)
            else:
                logger.warning("Failed to send notification: %s", title)
            return bool(result)
        except Exception as e:
            logger.error("Error sending notification: %s", e)
            return False

    async def send_test(self) -> bool:
        """Send a test notification."""
        return await self.notify(
            title="relayarr",
            body="Test notification - relayarr is configured correctly!",
            notify_type=apprise.NotifyType.INFO,
        )

    async def send_push_accepted(self, release_title: str, app: str) -> bool:
        """Send notification for a release accepted by an arr.

        Args:
            release_title: Title of the pushed release.
            app: Name of the arr instance.

        Returns:
            True if notification was sent successfully.
        """
        return await self.notify(
            title="relayarr - Release Approved",
            body=f"✅ {app} approved: {release_title}",
            notify_type=apprise.NotifyType.SUCCESS,
        )

    async def send_push_rejected(
        self, release_title: str, app: str, reasons: Sequence[str]
    ) -> bool:
        """Send notification for a release rejected by an arr."""
        return await self.notify(
            title="relayarr - Release Rejected",
            body=(
                f"⛔ {app} rejected: {release_title}\n"
                f"Reasons: {', '.join(reasons) or 'none given'}"
            ),
            notify_type=apprise.NotifyType.WARNING,
        )

    async def send_unauthorized(self, app: str) -> bool:
        return await self.notify(
            title="relayarr - Unauthorized",
            body=f"❌ {app} refused the API key. Check its configuration.",
            notify_type=apprise.NotifyType.FAILURE,
        )


# Global notifier instance
_notifier_instance: Notifier | None = None


def init_notifier(urls: list[str]) -> None:
    """Initialize global notifier instance.

    Should be called once during application startup.

    Args:
        urls: List of Apprise notification URLs.

    Raises:
        RuntimeError: If already initialized.
        ValueError: If any URL is invalid.
    """
    global _notifier_instance
    if _notifier_instance is not None:
        raise RuntimeError("Notifier already initialized.")

    _notifier_instance = Notifier(urls)


def get_notifier() -> Notifier:
    """Get global notifier instance.

    Raises:
        RuntimeError: If notifier has not been initialized.
    """
    if _notifier_instance is None:
        raise RuntimeError("Notifier not initialized. Call init_notifier() first.")
    return _notifier_instance
