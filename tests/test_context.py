"""Tests for cancellation and deadline handling."""

import pytest

from kms_cluster.context import Context
from kms_cluster.exceptions import DeadlineExceeded, JoinCancelled


class TestContext:
    def test_no_deadline(self):
        ctx = Context()
        ctx.check()
        assert ctx.remaining() is None
        assert ctx.timeout(10) == 10

    def test_cancel(self):
        ctx = Context()
        ctx.cancel()
        assert ctx.cancelled
        with pytest.raises(JoinCancelled, match="cancelled"):
            ctx.check()

    def test_expired_deadline(self):
        with pytest.raises(DeadlineExceeded):
            Context(timeout=0).check()

    def test_deadline_exceeded_is_a_cancellation(self):
        with pytest.raises(JoinCancelled):
            Context(timeout=-1).check()

    def test_timeout_capped_by_deadline(self):
        ctx = Context(timeout=60)
        assert ctx.timeout(10) == 10
        assert ctx.timeout(3600) <= 60
