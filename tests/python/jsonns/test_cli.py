"""Tests for the jsonns command-line entry points."""

import json
import sys

import pytest

from jsonns import fixtures, processor

NS = "http://example.com/ns#"


def _run(monkeypatch, module, *args):
    monkeypatch.setattr(sys, "argv", [module.__name__, *args])
    module.main()


@pytest.fixture()
def doc_file(tmp_path):
    path = tmp_path / "doc.json"
    path.write_text(json.dumps({"@context": {"foo": NS}, "foo:hello": "world"}))
    return path


@pytest.fixture()
def context_file(tmp_path):
    path = tmp_path / "ctx.json"
    path.write_text(json.dumps({"@context": {"@vocab": NS}}))
    return path


class TestProcessCommand:
    def test_absolute_output(self, monkeypatch, capsys, doc_file):
        _run(monkeypatch, processor, "process", "--input", str(doc_file))
        assert json.loads(capsys.readouterr().out) == {NS + "hello": "world"}

    def test_rules(self, monkeypatch, capsys, doc_file):
        _run(monkeypatch, processor, "process", "-i", str(doc_file), "-r", "bar=" + NS)
        assert json.loads(capsys.readouterr().out) == {"bar:hello": "world"}

    def test_default_namespace_rule(self, monkeypatch, capsys, doc_file):
        _run(monkeypatch, processor, "process", "-i", str(doc_file), "-r", "=" + NS)
        assert json.loads(capsys.readouterr().out) == {"hello": "world"}

    def test_target_file_rules_come_first(self, monkeypatch, capsys, tmp_path, doc_file):
        rules = tmp_path / "rules.txt"
        rules.write_text(f"first: {NS}\n")
        _run(
            monkeypatch,
            processor,
            "process",
            "-i",
            str(doc_file),
            "-t",
            str(rules),
            "-r",
            "second=" + NS,
        )
        assert json.loads(capsys.readouterr().out) == {"first:hello": "world"}

    def test_external_context(self, monkeypatch, capsys, tmp_path, context_file):
        doc = tmp_path / "plain.json"
        doc.write_text(json.dumps({"hello": "world"}))
        _run(monkeypatch, processor, "process", "-i", str(doc), "-c", str(context_file))
        assert json.loads(capsys.readouterr().out) == {NS + "hello": "world"}

    def test_output_file(self, monkeypatch, capsys, tmp_path, doc_file):
        out = tmp_path / "out.json"
        _run(monkeypatch, processor, "process", "-i", str(doc_file), "-o", str(out))
        assert json.loads(out.read_text()) == {NS + "hello": "world"}
        assert "Output written" in capsys.readouterr().err

    def test_bad_rule_exits(self, monkeypatch, capsys, doc_file):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, processor, "process", "-i", str(doc_file), "-r", "bar")
        assert exc.value.code == 1
        assert "PREFIX=BASE" in capsys.readouterr().err

    def test_missing_input_exits(self, monkeypatch, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, processor, "process", "-i", str(tmp_path / "nope.json"))
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_utf8_input_exits(self, monkeypatch, capsys, tmp_path):
        doc = tmp_path / "latin1.json"
        doc.write_bytes(b'{"a": "\xff"}')
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, processor, "process", "-i", str(doc))
        assert exc.value.code == 1
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_invalid_utf8_context_exits(self, monkeypatch, capsys, tmp_path, doc_file):
        ctx = tmp_path / "ctx.json"
        ctx.write_bytes(b'{"\xfe": null}')
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, processor, "process", "-i", str(doc_file), "-c", str(ctx))
        assert exc.value.code == 1
        assert "not valid UTF-8" in capsys.readouterr().err


class TestExpandCommand:
    def test_expand(self, monkeypatch, capsys, context_file):
        _run(monkeypatch, processor, "expand", "-n", "hello", "-c", str(context_file))
        assert capsys.readouterr().out.strip() == NS + "hello"

    def test_expand_failure(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, processor, "expand", "-n", "hello")
        assert exc.value.code == 1
        assert "does not expand" in capsys.readouterr().err


class TestFixturesCommand:
    def test_run_all_pass(self, monkeypatch, capsys, tmp_path):
        (tmp_path / "ok.txt").write_text(
            'OK\n\n{}\n\n-\n\n{"urn:a": 1}\n\n{"urn:a": 1}\n'
        )
        _run(monkeypatch, fixtures, "run", str(tmp_path))
        err = capsys.readouterr().err
        assert "PASS: OK [ok]" in err
        assert "1 of 1 fixtures passed" in err

    def test_run_failure_exits(self, monkeypatch, capsys, tmp_path):
        (tmp_path / "bad.txt").write_text(
            'Bad\n\n{}\n\n-\n\n{"urn:a": 1}\n\n{"urn:a": 2}\n'
        )
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, fixtures, "run", str(tmp_path))
        assert exc.value.code == 1
        assert "FAIL: Bad [bad]" in capsys.readouterr().err

    def test_show(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "show.txt"
        path.write_text('Show\n\n{"@vocab": "urn:x:"}\n\nx: urn:x:\n\n{"a": 1}\n\n{}\n')
        _run(monkeypatch, fixtures, "show", str(path))
        assert json.loads(capsys.readouterr().out) == {"x:a": 1}

    def test_run_missing_directory_exits(self, monkeypatch, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, fixtures, "run", str(tmp_path / "nope"))
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "Error: Could not read fixture directory" in err
        assert "fixtures passed" not in err

    def test_run_empty_directory_exits(self, monkeypatch, capsys, tmp_path):
        (tmp_path / "notes.md").write_text("not a fixture")
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, fixtures, "run", str(tmp_path))
        assert exc.value.code == 1
        assert "Error: No *.txt fixtures found" in capsys.readouterr().err
