import base64

import pytest

from lambda_invoke import _main

SERVICE_YML = """
service: new-service
provider:
  name: aws
functions:
  first:
    handler: handler.first
"""


class FakeProvider:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def request(self, service, method, params, stage, region):
        self.calls.append((service, method, params, stage, region))
        return self.response


@pytest.fixture
def service_dir(tmp_path, monkeypatch):
    (tmp_path / "serverless.yml").write_text(SERVICE_YML)
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
    monkeypatch.delenv("LAMBDA_INVOKE_STAGE", raising=False)
    return tmp_path


def _patch_provider(monkeypatch, response):
    provider = FakeProvider(response)
    monkeypatch.setattr(_main, "AwsProvider", lambda profile=None: provider)
    return provider


def test_invoke_command(service_dir, monkeypatch, capsys):
    provider = _patch_provider(
        monkeypatch,
        {"Payload": b'"done"', "LogResult": base64.b64encode(b"custom line").decode()},
    )
    _main.main(["invoke", "-f", "first", "--config", str(service_dir), "-d", "plain", "-l"])

    service, method, params, stage, region = provider.calls[0]
    assert (service, method, stage, region) == ("Lambda", "invoke", "dev", "us-east-1")
    assert params["FunctionName"] == "new-service-dev-first"
    assert params["LogType"] == "Tail"
    assert params["Payload"] == b'"plain"'
    out = capsys.readouterr().out
    assert '"done"' in out
    assert "custom line" in out


def test_stage_and_region_flags(service_dir, monkeypatch, capsys):
    provider = _patch_provider(monkeypatch, {"Payload": b"{}"})
    _main.main(
        ["invoke", "-f", "first", "--config", str(service_dir), "-s", "prod", "-r", "eu-west-1", "-t", "Event"]
    )
    _, _, params, stage, region = provider.calls[0]
    assert params["FunctionName"] == "new-service-prod-first"
    assert params["InvocationType"] == "Event"
    assert (stage, region) == ("prod", "eu-west-1")


def test_function_error_exits_non_zero(service_dir, monkeypatch, capsys):
    _patch_provider(monkeypatch, {"Payload": b'{"errorMessage": "boom"}', "FunctionError": "Unhandled"})
    with pytest.raises(SystemExit) as exc:
        _main.main(["invoke", "-f", "first", "--config", str(service_dir)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "boom" in captured.out
    assert "error: Invoked function failed" in captured.err


def test_unknown_function_exits_without_calling_provider(service_dir, monkeypatch, capsys):
    provider = _patch_provider(monkeypatch, {})
    with pytest.raises(SystemExit) as exc:
        _main.main(["invoke", "-f", "missing", "--config", str(service_dir)])
    assert exc.value.code == 1
    assert provider.calls == []
    assert "error:" in capsys.readouterr().err


def test_missing_data_file_exits(service_dir, monkeypatch, capsys):
    _patch_provider(monkeypatch, {})
    with pytest.raises(SystemExit):
        _main.main(["invoke", "-f", "first", "--config", str(service_dir), "-p", "nope.json"])
    assert "The file you provided does not exist." in capsys.readouterr().err


@pytest.mark.parametrize("name, content", [("bad.json", "{not json"), ("bad.yml", "key: [unclosed")])
def test_malformed_data_file_exits_with_error(service_dir, monkeypatch, capsys, name, content):
    (service_dir / name).write_text(content)
    provider = _patch_provider(monkeypatch, {})
    with pytest.raises(SystemExit) as exc:
        _main.main(["invoke", "-f", "first", "--config", str(service_dir), "-p", name])
    assert exc.value.code == 1
    assert provider.calls == []
    assert "error:" in capsys.readouterr().err


def test_directory_as_data_file_exits_with_error(service_dir, monkeypatch, capsys):
    (service_dir / "payloads").mkdir()
    _patch_provider(monkeypatch, {})
    with pytest.raises(SystemExit):
        _main.main(["invoke", "-f", "first", "--config", str(service_dir), "-p", "payloads"])
    assert "The file you provided does not exist." in capsys.readouterr().err
