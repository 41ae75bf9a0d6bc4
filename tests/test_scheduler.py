import logging

from timeline.scheduler import Scheduler


class TestScheduler:
    def test_fires_when_due(self):
        s = Scheduler()
        hits = []
        s.call_later(0.5, lambda: hits.append("a"))
        assert s.step(0.4) == 0
        assert hits == []
        assert s.step(0.1) == 1
        assert hits == ["a"]
        assert s.pending == 0

    def test_due_order_then_schedule_order(self):
        s = Scheduler()
        hits = []
        s.call_later(0.3, lambda: hits.append("late"))
        s.call_later(0.1, lambda: hits.append("first"))
        s.call_later(0.1, lambda: hits.append("second"))
        s.step(1.0)
        assert hits == ["first", "second", "late"]

    def test_cancel(self):
        s = Scheduler()
        hits = []
        t = s.call_later(0.1, lambda: hits.append(1))
        t.cancel()
        assert s.pending == 0
        s.step(1.0)
        assert hits == []

    def test_callback_scheduling_runs_next_step(self):
        s = Scheduler()
        hits = []

        def outer():
            hits.append("outer")
            s.call_later(0, lambda: hits.append("inner"))

        s.call_later(0.1, outer)
        s.step(0.2)
        assert hits == ["outer"]
        s.step(0.0)
        assert hits == ["outer", "inner"]

    def test_failing_callback_is_isolated(self, caplog):
        s = Scheduler()
        hits = []

        def boom():
            raise RuntimeError("boom")

        s.call_later(0.1, boom)
        s.call_later(0.1, lambda: hits.append("ok"))
        with caplog.at_level(logging.ERROR):
            assert s.step(0.2) == 1
        assert hits == ["ok"]
        assert "Scheduled callback failed" in caplog.text

    def test_clear(self):
        s = Scheduler()
        hits = []
        s.call_later(0.1, lambda: hits.append(1))
        s.clear()
        s.step(1.0)
        assert hits == []
        assert s.pending == 0
