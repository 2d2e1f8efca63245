"""Unit tests for post-commit hooks."""

from board.persistence.repository.inmemory import ImmediateAfterCommit
from board.persistence.transaction import DeferredAfterCommit


class TestDeferredAfterCommit:
    """Tests for DeferredAfterCommit."""

    def test_callbacks_wait_for_run(self):
        calls = []
        hooks = DeferredAfterCommit()

        hooks.add(lambda: calls.append("first"))
        hooks.add(lambda: calls.append("second"))

        assert calls == []
        hooks.run()
        assert calls == ["first", "second"]

    def test_callbacks_run_once(self):
        calls = []
        hooks = DeferredAfterCommit()
        hooks.add(lambda: calls.append("x"))

        hooks.run()
        hooks.run()

        assert calls == ["x"]
        assert hooks.pending == 0

    def test_discard_drops_callbacks(self):
        calls = []
        hooks = DeferredAfterCommit()
        hooks.add(lambda: calls.append("x"))

        hooks.discard()
        hooks.run()

        assert calls == []


class TestImmediateAfterCommit:
    """Tests for ImmediateAfterCommit."""

    def test_callback_runs_at_once(self):
        calls = []

        ImmediateAfterCommit().add(lambda: calls.append("x"))

        assert calls == ["x"]
