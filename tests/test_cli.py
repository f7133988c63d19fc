import io
import json
from unittest.mock import MagicMock, patch

from requests.exceptions import RequestException

from interface import cli

BLUEPRINT = {"rooms": [{"name": "Hall", "x": 5, "y": 5, "width": 20, "height": 10}]}


def test_render_file_prints_svg(tmp_path, capsys):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(BLUEPRINT), encoding="utf-8")
    assert cli.main(["render", str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<svg")
    assert '<text x="15" y="25" font-size="14">Hall</text>' in out


def test_render_invalid_file_exits_nonzero(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text('{"rooms": "oops"}', encoding="utf-8")
    assert cli.main(["render", str(path)]) == 1
    assert capsys.readouterr().out == ""


def test_render_missing_file_exits_nonzero(tmp_path):
    assert cli.main(["render", str(tmp_path / "nope.json")]) == 1


def test_render_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(BLUEPRINT)))
    assert cli.main(["render", "-"]) == 0
    assert "Hall" in capsys.readouterr().out


def test_generate_renders_service_blueprint(capsys):
    resp = MagicMock()
    resp.json.return_value = BLUEPRINT
    with patch("interface.cli.requests.post", return_value=resp) as post:
        assert cli.main(["generate", "a hall", "--api", "http://api.test/"]) == 0
    assert post.call_args.args[0] == "http://api.test/api/blueprint"
    assert post.call_args.kwargs["json"] == {"prompt": "a hall"}
    assert '<rect x="5" y="5" width="20" height="10"' in capsys.readouterr().out


def test_generate_json_flag_prints_blueprint(capsys):
    resp = MagicMock()
    resp.json.return_value = BLUEPRINT
    with patch("interface.cli.requests.post", return_value=resp):
        assert cli.main(["generate", "a hall", "--json"]) == 0
    assert json.loads(capsys.readouterr().out) == BLUEPRINT


def test_generate_request_failure_exits_nonzero():
    with patch("interface.cli.requests.post", side_effect=RequestException("boom")):
        assert cli.main(["generate", "a hall"]) == 1
