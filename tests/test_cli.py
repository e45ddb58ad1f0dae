from orbitalcloud.__main__ import main


def test_summary(capsys):
    assert main(["--z", "1", "--samples", "500", "--seed", "42"]) == 0
    out = capsys.readouterr().out
    assert "Hydrogen" in out
    assert "1s" in out
    assert "Vertices:      500 (0 fallback)" in out


def test_invalid_orbital_exits_with_2(capsys):
    assert main(["--z", "1", "--n", "2", "--l", "2"]) == 2
    assert "Invalid input" in capsys.readouterr().out


def test_invalid_atomic_number_exits_with_2(capsys):
    assert main(["--z", "1001"]) == 2
    assert "must not exceed" in capsys.readouterr().out


def test_bad_environment_override_exits_with_2(monkeypatch, capsys):
    monkeypatch.setenv("ORBITALCLOUD_BATCH_SIZE", "many")
    assert main(["--samples", "10"]) == 2
    assert "ORBITALCLOUD_BATCH_SIZE" in capsys.readouterr().out


def test_plot_and_output(tmp_path, capsys):
    target = tmp_path / "cloud.vtp"
    assert main(["--z", "6", "--n", "2", "--l", "1", "--m", "-1", "--samples", "300",
                 "--plot", "--output", str(target), "--log-level", "WARNING"]) == 0
    assert target.exists()
    assert "2py" in capsys.readouterr().out


def test_log_file(tmp_path):
    log_file = tmp_path / "run.log"
    assert main(["--samples", "50", "--log-level", "DEBUG", "--log-file", str(log_file)]) == 0
    assert "Sampling 50 points" in log_file.read_text(encoding="utf-8")
