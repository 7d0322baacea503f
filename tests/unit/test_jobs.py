import threading
import time

from wewinbid.modules.jobs.services import jobs


def test_stop_waits_for_running_jobs(monkeypatch):
    started, finished = threading.Event(), threading.Event()

    def slow_run():
        started.set()
        time.sleep(0.2)
        finished.set()
        return {}

    monkeypatch.setattr(jobs, "run_all_jobs", slow_run)
    thread = jobs.start_job_thread(interval_minutes=0.001)
    assert started.wait(5)

    jobs.stop_job_thread()
    assert finished.is_set()
    assert not thread.is_alive()


def test_disabled_interval_starts_nothing():
    assert jobs.start_job_thread(interval_minutes=0) is None
