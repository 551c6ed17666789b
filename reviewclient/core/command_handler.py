"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the ReviewClient and reports results through the UserInterface. Each
handler returns True on success so the CLI can set its exit code.
"""

import logging

from reviewclient.core.client import ReviewClient
from reviewclient.domain.interfaces.user_interface import UserInterface
from reviewclient.domain.models.errors import ClientFacingError
from reviewclient.domain.models.review import SubmissionPayload

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong. Details were written to the log."


class CommandHandler:
    """Handles incoming commands and delegates to the review client."""

    def __init__(self, client: ReviewClient, ui: UserInterface):
        self.client = client
        self.ui = ui

    async def handle_prewarm(self) -> bool:
        """Handles the 'prewarm' command: waits for the warm-up call to settle."""
        logger.info(f"Handling 'prewarm' command against {self.client.base_url}")
        task = self.client.prewarm()
        try:
            healthy = bool(await task)
        except Exception:
            # Already logged by the prewarm scheduler's error sink.
            healthy = False

        if healthy:
            self.ui.display_info("Backend is awake.")
        else:
            self.ui.display_warning("Backend did not answer the warm-up call; it will wake up on the first request.")
        return healthy

    async def handle_list(self) -> bool:
        """Handles the 'list' command."""
        logger.info("Handling 'list' command.")
        try:
            reviews = await self.client.fetch_reviews()
        except ClientFacingError as e:
            self.ui.display_error(e.message)
            return False
        except Exception as e:
            logger.error(f"List command failed: {e}", exc_info=True)
            self.ui.display_error(UNEXPECTED_ERROR_MESSAGE)
            return False
        self.ui.display_reviews(reviews)
        return True

    async def handle_submit(self, payload: SubmissionPayload) -> bool:
        """Handles the 'submit' command. The payload is forwarded unvalidated."""
        logger.info(f"Handling 'submit' command for reviewer '{payload.get('name', '')}'")
        try:
            ack = await self.client.submit_review(payload)
        except ClientFacingError as e:
            self.ui.display_error(e.message)
            return False
        except Exception as e:
            logger.error(f"Submit command failed: {e}", exc_info=True)
            self.ui.display_error(UNEXPECTED_ERROR_MESSAGE)
            return False
        self.ui.display_ack(ack)
        return True

    async def close(self) -> None:
        await self.client.aclose()
