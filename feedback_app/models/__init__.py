from .feedback import Feedback
from .entry import EntryId, FeedbackEntry, ORIGIN_DATABASE, ORIGIN_FILE

__all__ = ["Feedback", "EntryId", "FeedbackEntry", "ORIGIN_DATABASE", "ORIGIN_FILE"]
