"""Interface for presenting results to the user.

Defines the contract for displaying reviews, acknowledgments, errors and
informational messages, allowing different UI implementations (e.g.,
console, web templates).
"""

import abc
from typing import Any, Sequence

from reviewclient.domain.models.review import ReviewRecord, ServerAck


class UserInterface(abc.ABC):
    """Abstract Base Class for user-facing output."""

    @abc.abstractmethod
    def display_reviews(self, reviews: Sequence[ReviewRecord], **kwargs: Any) -> None:
        """Displays a list of approved reviews.

        Args:
            reviews: Review records as returned by the backend.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_ack(self, ack: ServerAck, **kwargs: Any) -> None:
        """Displays the backend's acknowledgment of a submission.

        Args:
            ack: The acknowledgment body, unchanged.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: A user-safe error message.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message. Defaults to the info channel."""
        self.display_info(warning_message, **kwargs)
