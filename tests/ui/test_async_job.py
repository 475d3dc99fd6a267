import threading

from tilawaflow.gui.async_job import JobDispatcher


def test_dispatcher_delivers_result_on_gui_thread(qtbot):
    dispatcher = JobDispatcher()
    delivered = []

    dispatcher(
        lambda: threading.current_thread().name,
        lambda result: delivered.append((result, threading.current_thread() is threading.main_thread())),
        lambda exc: delivered.append(exc),
    )

    qtbot.waitUntil(lambda: bool(delivered), timeout=5000)
    worker_name, on_main = delivered[0]
    assert on_main
    assert worker_name != threading.main_thread().name
    qtbot.waitUntil(lambda: dispatcher.outstanding == 0, timeout=5000)


def test_dispatcher_delivers_errors(qtbot):
    dispatcher = JobDispatcher()
    errors = []

    def boom():
        raise RuntimeError("offline")

    dispatcher(boom, lambda result: None, errors.append)

    qtbot.waitUntil(lambda: bool(errors), timeout=5000)
    assert str(errors[0]) == "offline"
