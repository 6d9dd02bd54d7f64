import pytest

from jobmail.config import MAX_SCAN_RESULTS, PROJECT_ROOT, clamp_max_results, load_settings
from jobmail.mailbox import HttpMailbox, MockMailbox, get_mailbox
from jobmail.store import CsvApplicationStore, HttpApplicationStore, get_store


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("JOBMAIL_API_URL", "JOBMAIL_API_TOKEN", "JOBMAIL_STORE", "JOBMAIL_STORE_PATH"):
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path):
    settings = load_settings(tmp_path / "missing.yaml")
    assert settings["api_url"] == ""
    assert settings["store"] == "csv"
    assert settings["scan"] == {"max_results": 500, "lookback_days": 30}
    assert settings["commit"]["max_workers"] == 4
    assert settings["store_path"].endswith("applications.csv")


def test_yaml_then_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "api_url: http://localhost:8232/api/\n"
        "store: http\n"
        "store_path: data/apps.csv\n"
        "scan:\n  lookback_days: 7\n  max_results: 9000\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("JOBMAIL_API_TOKEN", "secret")
    settings = load_settings(path)
    assert settings["api_url"] == "http://localhost:8232/api"
    assert settings["api_token"] == "secret"
    assert settings["scan"] == {"lookback_days": 7, "max_results": MAX_SCAN_RESULTS}
    assert settings["store_path"] == str(PROJECT_ROOT / "data" / "apps.csv")

    monkeypatch.setenv("JOBMAIL_STORE", "csv")
    assert load_settings(path)["store"] == "csv"


def test_non_mapping_yaml_is_ignored(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_settings(path)["store"] == "csv"


@pytest.mark.parametrize("value, expected", [(200, 200), ("50", 50), (0, 500), (-3, 500), (9999, 500), (None, 500), ("x", 500)])
def test_clamp_max_results(value, expected):
    assert clamp_max_results(value) == expected


def test_factories_follow_settings(tmp_path):
    settings = load_settings(tmp_path / "missing.yaml")
    assert isinstance(get_mailbox(settings), MockMailbox)
    assert isinstance(get_store(settings), CsvApplicationStore)

    settings["store"] = "http"
    assert isinstance(get_store(settings), CsvApplicationStore)

    settings["api_url"] = "http://tracker.test/api"
    assert isinstance(get_mailbox(settings), HttpMailbox)
    assert isinstance(get_store(settings), HttpApplicationStore)
