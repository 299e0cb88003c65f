import time

from arkmcp.spinner import FRAMES, Spinner


def test_start_stop(capsys):
    spinner = Spinner(0.05, "Testing...")
    spinner.start()
    time.sleep(0.12)
    spinner.stop("Done!")
    out = capsys.readouterr().out
    assert f"\r{FRAMES[0]} Testing..." in out
    assert out.endswith("\r\x1b[KDone!\n")


def test_set_message(capsys):
    spinner = Spinner(0.03, "Init")
    spinner.start()
    time.sleep(0.06)
    spinner.set_message("Step2")
    time.sleep(0.1)
    spinner.stop("Finish!")
    out = capsys.readouterr().out
    assert "Init" in out
    assert "Step2" in out
    assert out.index("Init") < out.index("Step2")
    assert spinner.message == "Step2"
    assert out.endswith("Finish!\n")


def test_multiple_start_stop(capsys):
    spinner = Spinner(0.01, "Multi")
    for _ in range(3):
        spinner.start()
        time.sleep(0.03)
        spinner.stop()
    out = capsys.readouterr().out
    assert out.count(f"{FRAMES[0]} Multi") >= 3
    assert out.endswith("\r\x1b[K")


def test_stop_without_start(capsys):
    spinner = Spinner(0.01, "NoStart")
    spinner.stop()
    assert capsys.readouterr().out == "\r\x1b[K"


def test_long_message(capsys):
    message = "X" * 50
    spinner = Spinner(0.02, message)
    spinner.start()
    time.sleep(0.06)
    spinner.stop("Done!")
    out = capsys.readouterr().out
    assert message in out
    assert out.endswith("Done!\n")


def test_frames_cycle_in_order(capsys):
    spinner = Spinner(0.005, "cycle")
    spinner.start()
    time.sleep(0.1)
    spinner.stop()
    out = capsys.readouterr().out
    assert f"{FRAMES[0]} cycle" in out
    assert f"{FRAMES[1]} cycle" in out
    assert out.index(f"{FRAMES[0]} cycle") < out.index(f"{FRAMES[1]} cycle")