"""Test doubles for lookbook protocols."""

from tests.mocks.providers import MockSuggestionProvider, RecordingRenderer
from tests.mocks.rack import FRAME, Recorder, settle

__all__ = ["FRAME", "MockSuggestionProvider", "RecordingRenderer", "Recorder", "settle"]
