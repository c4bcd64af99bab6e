from datetime import time

from utils.config import Settings


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("M3U", "XML_TV", "CACHE_DIR", "SERVER_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.M3U is None
    assert settings.XML_TV is None
    assert settings.CACHE_DIR == "./ilovetv_cache"
    assert settings.SERVER_HOST == "127.0.0.1"
    assert settings.SERVER_PORT == 5050
    assert settings.USER_AGENT == "ilovetv"
    assert settings.REFRESH_TIME == time(5, 30)
    assert settings.CATCH_UP_CUTOFF == time(19, 0)
    assert settings.STARTUP_RETRIES == 0
    assert settings.SCHEDULED_RETRIES == 10
    assert settings.RETRY_DELAY_SECONDS == 30


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("M3U", "https://upstream.test/list.m3u")
    monkeypatch.setenv("XML_TV", "https://upstream.test/guide.xml")
    monkeypatch.setenv("SERVER_PORT", "8080")
    monkeypatch.setenv("SCHEDULED_RETRIES", "3")
    monkeypatch.setenv("REFRESH_TIME", "04:15:00")

    settings = Settings()

    assert settings.M3U == "https://upstream.test/list.m3u"
    assert settings.XML_TV == "https://upstream.test/guide.xml"
    assert settings.SERVER_PORT == 8080
    assert settings.SCHEDULED_RETRIES == 3
    assert settings.REFRESH_TIME == time(4, 15)


def test_dotenv_file_is_read(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("M3U", raising=False)
    (tmp_path / ".env").write_text("M3U=https://dotenv.test/list.m3u\n")

    assert Settings().M3U == "https://dotenv.test/list.m3u"
