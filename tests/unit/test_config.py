"""Unit tests for configuration loading."""

from coursequiz.config import CourseQuizConfig


class TestCourseQuizConfig:

    def test_defaults_have_no_timeouts(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        config = CourseQuizConfig()

        assert config.api.http_timeout_seconds is None
        assert config.attempt.load_timeout_seconds is None
        assert config.attempt.submit_timeout_seconds is None
        assert config.api.activities_endpoint == "/atividades"
        assert config.api.submissions_endpoint == "/progresso"

    def test_nested_environment_variables(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COURSEQUIZ_API__BASE_URL", "https://courses.example.com/api")
        monkeypatch.setenv("COURSEQUIZ_ATTEMPT__SUBMIT_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("COURSEQUIZ_DATA_DIR", str(tmp_path))

        config = CourseQuizConfig()

        assert config.api.base_url == "https://courses.example.com/api"
        assert config.attempt.submit_timeout_seconds == 12.5
        assert config.session_file == tmp_path / "session.json"
