import threading

import pytest

from arkvault.progress import Progress, Report, Status


def test_root_report_initial_state():
    progress, _task = Progress.create(1, "Ark Creation")
    report = progress.latest()
    assert report.id == 1
    assert report.label == "Ark Creation"
    assert report.status is Status.WAITING
    assert report.total() == 1
    assert report.completed() == 0
    assert report.subreports == []


def test_children_get_sequential_ids():
    progress, task = Progress.create(1, "root")
    first = task.child(2, "a")
    second = task.child(3, "b")
    grand = first.child(1, "c")
    report = progress.latest()
    assert [r.id for r in report.subreports] == [first.id, second.id]
    assert first.id == 2 and second.id == 3 and grand.id == 4
    assert report.find(grand.id).label == "c"
    assert report.total() == 1 + 2 + 3 + 1


def test_status_transitions():
    progress, task = Progress.create(1, "root")
    task.start()
    assert progress.latest().status is Status.ACTIVE
    task.stop()
    assert progress.latest().status is Status.WAITING
    task.complete()
    assert progress.latest().status is Status.SUCCESS
    task.failure()
    assert progress.latest().status is Status.FAILURE


def test_iadd_marks_active_and_counts():
    progress, task = Progress.create(1, "root")
    child = task.child(2, "work")
    child += 1
    sub = progress.latest().find(child.id)
    assert sub.status is Status.ACTIVE
    assert sub.own_completed == 1
    child += 1
    assert progress.latest().completed() == 2


def test_zero_progress_changes_nothing():
    progress, task = Progress.create(1, "root")
    progress.latest()
    task.add(0)
    assert progress.wait(timeout=0) is False
    assert progress.latest().status is Status.WAITING


def test_negative_progress_rejected():
    _progress, task = Progress.create(1, "root")
    with pytest.raises(ValueError):
        task.add(-1)


def test_percent_completed():
    empty = Report(id=1, label=None, own_total=0)
    assert empty.percent_completed() == 0.0
    progress, task = Progress.create(2, "root")
    task += 2
    assert progress.latest().percent_completed() == 1.0
    task2_progress, task2 = Progress.create(4, None)
    task2 += 1
    report = task2_progress.latest()
    assert 0.0 < report.percent_completed() < 1.0


def test_find_missing_returns_none():
    progress, _task = Progress.create(1, "root")
    assert progress.latest().find(99) is None


def test_wait_reports_changes_only_once():
    progress, task = Progress.create(1, "root")
    assert progress.wait(timeout=0) is False
    task.start()
    assert progress.wait(timeout=0) is True
    assert progress.wait(timeout=0) is False
    task.start()  # already active, no change
    assert progress.wait(timeout=0) is False


def test_latest_is_a_snapshot():
    progress, task = Progress.create(1, "root")
    snapshot = progress.latest()
    task.complete()
    assert snapshot.status is Status.WAITING
    assert progress.latest().status is Status.SUCCESS


def test_wait_wakes_on_change_from_other_thread():
    progress, task = Progress.create(1, "root")
    timer = threading.Timer(0.05, task.start)
    timer.start()
    try:
        assert progress.wait(timeout=5) is True
    finally:
        timer.join()
    assert progress.latest().status is Status.ACTIVE