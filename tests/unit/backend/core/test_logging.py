"""
Unit Tests for Logging Helpers.
"""

from unittest.mock import MagicMock

import pytest

from nowen_note.backend.core.logging import VALID_SOURCES, log_with_source


class TestLogWithSource:
    """Tests for source-tagged logging outside requests."""

    @pytest.mark.parametrize("source", sorted(VALID_SOURCES))
    def test_known_source_is_passed_through(self, source):
        logger = MagicMock()

        log_with_source(logger, source, "INFO", "Index rebuilt", count=3)

        logger.info.assert_called_once_with("Index rebuilt", source=source, count=3)

    @pytest.mark.parametrize("source", ["web", "internal", "telegram"])
    def test_unknown_source_is_rejected(self, source):
        with pytest.raises(ValueError, match="Unknown log source"):
            log_with_source(MagicMock(), source, "info", "x")
