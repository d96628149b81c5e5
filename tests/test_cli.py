# tests/test_cli.py - build_markov / generate entry points
import pytest

import build_markov
import generate
from markov import MarkovChain


@pytest.fixture
def messages(tmp_path):
    path = tmp_path / "messages.txt"
    path.write_text("see you tomorrow\nsee you\n\n", encoding="utf-8")
    return path


def test_generate_prints_amount_lines(messages, capsys):
    generate.main([str(messages), "25", "--rng-seed", "1"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 25
    assert set(lines) <= {"see you tomorrow", "see you", ""}


def test_generate_defaults_to_ten(messages, capsys):
    generate.main([str(messages)])
    assert len(capsys.readouterr().out.splitlines()) == 10


def test_generate_single_line_is_deterministic(tmp_path, capsys):
    path = tmp_path / "one.txt"
    path.write_text("a b c\n", encoding="utf-8")
    generate.main([str(path), "3"])
    assert capsys.readouterr().out == "a b c\na b c\na b c\n"


def test_generate_rejects_non_positive_amount(messages):
    with pytest.raises(SystemExit):
        generate.main([str(messages), "0"])


def test_generate_empty_input_exits(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        generate.main([str(path)])
    assert "Nothing to generate" in str(exc.value.code)


def test_generate_requires_a_source():
    with pytest.raises(SystemExit):
        generate.main([])


def test_build_then_generate_from_model(messages, tmp_path, capsys):
    out = tmp_path / "models" / "chat.json.gz"
    build_markov.main(["--corpus", str(messages), "--out", str(out)])
    assert "Saved Markov model" in capsys.readouterr().out

    mc = MarkovChain.load(str(out))
    assert mc.count("see", "you") == 2

    generate.main(["--model", str(out), "4", "--rng-seed", "9"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert set(lines) <= {"see you tomorrow", "see you", ""}


def test_generate_rejects_input_and_model(messages, tmp_path):
    out = tmp_path / "chat.json"
    MarkovChain().save(str(out))
    with pytest.raises(SystemExit):
        generate.main([str(messages), "--model", str(out)])


def test_build_without_corpus_files_exits(tmp_path):
    with pytest.raises(SystemExit):
        build_markov.main(["--corpus", str(tmp_path / "*.txt"), "--out", str(tmp_path / "m.json")])


def test_read_lines_skips_unreadable(messages, tmp_path, caplog):
    lines = list(build_markov.read_lines([str(tmp_path / "missing.txt"), str(messages)]))
    assert lines == ["see you tomorrow\n", "see you\n", "\n"]
    assert "failed to read" in caplog.text
