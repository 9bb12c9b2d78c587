import json
from pathlib import Path

import pytest

from gdrive_model import InvalidArgument, load_config
from gdrive_model.config import DEFAULT_SCOPES, TOKEN_FILE


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.json")

    assert config.scopes == DEFAULT_SCOPES
    assert config.token_file == TOKEN_FILE
    assert config.user_id == "me"


def test_values_read_from_file(tmp_path):
    path = tmp_path / "gdrive_model.json"
    path.write_text(json.dumps({
        "auth": {
            "scopes": ["https://www.googleapis.com/auth/drive"],
            "token_file": "token.json",
            "token_dir": str(tmp_path / "tokens"),
            "client_secret_file": str(tmp_path / "secret.json"),
        },
        "user_id": "someone@example.com",
        "log_level": "DEBUG",
    }))

    config = load_config(path)

    assert config.scopes == ["https://www.googleapis.com/auth/drive"]
    assert config.token_file == "token.json"
    assert config.token_dir == tmp_path / "tokens"
    assert config.client_secret_file == Path(tmp_path / "secret.json")
    assert config.user_id == "someone@example.com"
    assert config.log_level == "DEBUG"


def test_malformed_file(tmp_path):
    path = tmp_path / "gdrive_model.json"
    path.write_text("{not json")

    with pytest.raises(InvalidArgument):
        load_config(path)


def test_wrong_shape(tmp_path):
    path = tmp_path / "gdrive_model.json"
    path.write_text(json.dumps({"auth": ["scopes"]}))

    with pytest.raises(InvalidArgument):
        load_config(path)
