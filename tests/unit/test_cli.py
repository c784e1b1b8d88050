"""
Unit tests for the command-line interface.
"""

import io
import json

import pytest

from conversation_classifier import cli
from conversation_classifier.classifier import ConversationClassifier
from conversation_classifier.config import Settings
from conversation_classifier.logging_config import configure_logging
from conversation_classifier.retry.policy import RetryPolicy


@pytest.fixture(autouse=True)
def _restore_logging():
    """main() points the log handler at the captured stderr; reset it afterwards."""
    yield
    configure_logging("DEBUG", "development")


@pytest.fixture
def cli_env(monkeypatch, test_settings, taxonomy, scripted_collaborator):
    """Patch settings and classifier construction; returns a dict to script and inspect runs."""
    state = {"outcomes": [], "settings": None, "taxonomy": None}

    def fake_from_settings(settings, taxonomy=None, transport=None):
        state["settings"] = settings
        state["taxonomy"] = taxonomy
        collaborator = scripted_collaborator(state["outcomes"])
        state["collaborator"] = collaborator
        return ConversationClassifier(
            taxonomy,
            collaborator,
            policy=RetryPolicy(max_attempts=settings.MAX_ATTEMPTS),
        )

    monkeypatch.setattr(cli, "get_settings", lambda: test_settings)
    monkeypatch.setattr(cli.ConversationClassifier, "from_settings", fake_from_settings)
    return state


class TestCLI:
    """Test suite for cli.main."""

    def test_classifies_argument(self, cli_env, capsys, make_match_payload, article_conversation):
        cli_env["outcomes"] = [make_match_payload()]

        exit_code = cli.main([article_conversation])

        assert exit_code == cli.EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["error"] is False
        assert output["classification"] == {
            "topic": "language_understanding",
            "tags": ["text_classification"],
            "title": "Categorizing an article into predefined categories",
        }
        assert output["chain_of_thought"]

    def test_show_metadata(self, cli_env, capsys, make_match_payload):
        cli_env["outcomes"] = [RuntimeError("timeout"), make_match_payload()]

        exit_code = cli.main(["Summarize this article for me.", "--show-metadata"])

        assert exit_code == cli.EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["result"]["classification"]["topic"] == "language_understanding"
        assert output["metadata"]["total_attempts"] == 2
        assert output["metadata"]["failures"][0]["error_type"] == "RuntimeError"
        assert output["metadata"]["exhausted"] is False

    def test_compact_output(self, cli_env, capsys, make_match_payload):
        cli_env["outcomes"] = [make_match_payload()]

        cli.main(["Translate this.", "--indent", "0"])

        out = capsys.readouterr().out
        assert out.count("\n") == 1
        assert json.loads(out)["error"] is False

    def test_reads_stdin(self, cli_env, capsys, monkeypatch, make_match_payload):
        cli_env["outcomes"] = [make_match_payload(topic="multilingualism", tags=["translation"])]
        monkeypatch.setattr("sys.stdin", io.StringIO("Translate this sentence into French."))

        exit_code = cli.main([])

        assert exit_code == cli.EXIT_OK
        assert json.loads(capsys.readouterr().out)["classification"]["topic"] == "multilingualism"
        messages = cli_env["collaborator"].calls[0][0]
        assert "Translate this sentence into French." in messages[1].content

    def test_reads_file(self, cli_env, capsys, tmp_path, make_match_payload):
        cli_env["outcomes"] = [make_match_payload()]
        path = tmp_path / "conversation.txt"
        path.write_text("User: Is this review positive?\nAssistant: Mostly.", encoding="utf-8")

        exit_code = cli.main(["--file", str(path)])

        assert exit_code == cli.EXIT_OK
        messages = cli_env["collaborator"].calls[0][0]
        assert "User: Is this review positive?\nAssistant: Mostly." in messages[1].content

    def test_missing_file(self, cli_env, capsys, tmp_path):
        exit_code = cli.main(["--file", str(tmp_path / "missing.txt")])

        assert exit_code == cli.EXIT_USAGE
        assert "cannot read conversation" in capsys.readouterr().err

    def test_empty_conversation(self, cli_env, capsys):
        exit_code = cli.main(["   "])

        assert exit_code == cli.EXIT_USAGE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "conversation is empty" in captured.err

    def test_taxonomy_file(self, cli_env, capsys, fixtures_dir):
        cli_env["outcomes"] = [{
            "chain_of_thought": "Double charge.",
            "error": False,
            "classification": {"topic": "billing", "tags": ["refund"], "title": "Refund for a double charge"},
        }]

        exit_code = cli.main(["I was charged twice.", "--taxonomy", str(fixtures_dir / "taxonomy_support.json")])

        assert exit_code == cli.EXIT_OK
        assert cli_env["taxonomy"].topics == ("billing", "technical_support")
        assert json.loads(capsys.readouterr().out)["classification"]["topic"] == "billing"

    def test_invalid_taxonomy_file(self, cli_env, capsys, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_text('{"capabilities": "nope"}', encoding="utf-8")

        exit_code = cli.main(["text", "--taxonomy", str(path)])

        assert exit_code == cli.EXIT_USAGE
        assert "taxonomy" in capsys.readouterr().err

    def test_conversation_file_not_utf8(self, cli_env, capsys, tmp_path):
        path = tmp_path / "conversation.txt"
        path.write_bytes(b"hello \xff world")

        exit_code = cli.main(["--file", str(path)])

        assert exit_code == cli.EXIT_USAGE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "cannot read conversation" in captured.err

    def test_taxonomy_file_not_utf8(self, cli_env, capsys, tmp_path):
        path = tmp_path / "taxonomy.json"
        path.write_bytes(b"caf\xe9")

        exit_code = cli.main(["hello there", "--taxonomy", str(path)])

        assert exit_code == cli.EXIT_USAGE
        assert "not UTF-8" in capsys.readouterr().err

    def test_taxonomy_path_is_directory(self, cli_env, capsys, tmp_path):
        exit_code = cli.main(["hello there", "--taxonomy", str(tmp_path)])

        assert exit_code == cli.EXIT_USAGE
        assert "cannot read taxonomy file" in capsys.readouterr().err

    def test_invalid_max_attempts(self, cli_env, capsys):
        exit_code = cli.main(["text", "--max-attempts", "0"])

        assert exit_code == cli.EXIT_USAGE
        assert "--max-attempts" in capsys.readouterr().err

    def test_overrides_reach_settings(self, cli_env, make_match_payload):
        cli_env["outcomes"] = [make_match_payload()]

        cli.main(["text", "--provider", "ollama", "--model", "llama3.1:8b", "--max-attempts", "5"])

        settings = cli_env["settings"]
        assert settings.LLM_PROVIDER == "ollama"
        assert settings.OLLAMA_MODEL == "llama3.1:8b"
        assert settings.OPENAI_MODEL == "gpt-4o-mini"
        assert settings.MAX_ATTEMPTS == 5

    def test_model_override_uses_configured_provider(self, cli_env, make_match_payload):
        cli_env["outcomes"] = [make_match_payload()]

        cli.main(["text", "--model", "gpt-4o"])

        assert cli_env["settings"].OPENAI_MODEL == "gpt-4o"

    def test_failure_after_all_attempts(self, cli_env, capsys):
        cli_env["outcomes"] = [RuntimeError("upstream unavailable")]

        exit_code = cli.main(["text"])

        assert exit_code == cli.EXIT_FAILURE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "classification failed: upstream unavailable" in captured.err
        assert len(cli_env["collaborator"].calls) == 3

    def test_exhausted_result_still_printed(self, cli_env, capsys, make_new_category_payload):
        cli_env["outcomes"] = [make_new_category_payload()]

        exit_code = cli.main(["How do I make risotto?", "--show-metadata"])

        assert exit_code == cli.EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["result"]["error"] is True
        assert output["result"]["classification"]["topic"] == "cooking_advice"
        assert output["metadata"]["exhausted"] is True


class TestCLIConfiguration:
    """Tests that exercise the real classifier construction."""

    def test_missing_api_key(self, monkeypatch, capsys, test_settings):
        settings = test_settings.model_copy(update={"OPENAI_API_KEY": None})
        monkeypatch.setattr(cli, "get_settings", lambda: settings)

        exit_code = cli.main(["text"])

        assert exit_code == cli.EXIT_USAGE
        assert "OPENAI_API_KEY is not set" in capsys.readouterr().err

    def test_unknown_provider_setting(self, monkeypatch, capsys, test_settings):
        settings = test_settings.model_copy(update={"LLM_PROVIDER": "anthropic"})
        monkeypatch.setattr(cli, "get_settings", lambda: settings)

        exit_code = cli.main(["text"])

        assert exit_code == cli.EXIT_USAGE

    def test_invalid_environment_value(self, monkeypatch, capsys):
        monkeypatch.setenv("MAX_ATTEMPTS", "abc")
        monkeypatch.setattr(cli, "get_settings", lambda: Settings(_env_file=None))

        exit_code = cli.main(["text"])

        assert exit_code == cli.EXIT_USAGE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "invalid settings: MAX_ATTEMPTS" in captured.err

    def test_fractional_backoff_setting(self, monkeypatch, capsys, test_settings):
        settings = test_settings.model_copy(update={"RETRY_BACKOFF_BASE": 0.5})
        monkeypatch.setattr(cli, "get_settings", lambda: settings)

        exit_code = cli.main(["text"])

        assert exit_code == cli.EXIT_USAGE
        assert "backoff_base" in capsys.readouterr().err
