import os
import unittest
from unittest.mock import AsyncMock, patch, mock_open

from io import StringIO
from ccdcc import cli


class TestCommandLineParser(unittest.TestCase):
    """Tests for the command-line argument parser in cli.py."""

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.ask", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_ask_command_parses_correctly(self, mock_autocomplete, mock_ask, mock_validate_config):
        """Verify `ccdcc ask -p "prompt" -m 3` calls the handler with the right args."""
        cli.run_cli(["ask", "-p", "What is new?", "-m", "3"])

        mock_validate_config.assert_called_once()
        mock_ask.assert_awaited_once()
        _config, prompt, max_turns, interactive = mock_ask.call_args.args
        self.assertEqual(prompt, "What is new?")
        self.assertEqual(max_turns, 3)
        self.assertFalse(interactive)

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.ask", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_ask_defaults(self, mock_autocomplete, mock_ask, mock_validate_config):
        cli.run_cli(["ask", "--interactive"])

        _config, prompt, max_turns, interactive = mock_ask.call_args.args
        self.assertIsNone(prompt)
        self.assertEqual(max_turns, 5)
        self.assertTrue(interactive)

    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_ask_rejects_non_positive_max_turns(self, mock_autocomplete, mock_stderr):
        with self.assertRaises(SystemExit) as cm:
            cli.run_cli(["ask", "-p", "hi", "--max-turns", "0"])

        self.assertEqual(cm.exception.code, 2)
        self.assertIn("0 must be a positive integer", mock_stderr.getvalue())

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.lint", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_lint_defaults(self, mock_autocomplete, mock_lint, mock_validate_config):
        cli.run_cli(["lint"])

        mock_lint.assert_awaited_once_with(
            cli._ai_config, None, output="./linted", fix=False, format="summary"
        )

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.lint", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_lint_options(self, mock_autocomplete, mock_lint, mock_validate_config):
        cli.run_cli(["lint", "docs", "--fix", "-o", "out", "--format", "json"])

        mock_lint.assert_awaited_once_with(
            cli._ai_config, "docs", output="out", fix=True, format="json"
        )

    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_lint_rejects_unknown_output_format(self, mock_autocomplete, mock_stderr):
        with self.assertRaises(SystemExit):
            cli.run_cli(["lint", "--format", "xml"])

        self.assertIn("invalid choice: 'xml'", mock_stderr.getvalue())

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.interactive", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_interactive_command(self, mock_autocomplete, mock_interactive, mock_validate_config):
        cli.run_cli(["interactive"])
        mock_interactive.assert_awaited_once_with(cli._ai_config)

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.cli.gen", new_callable=AsyncMock)
    @patch("argcomplete.autocomplete")
    def test_gen_command(self, mock_autocomplete, mock_gen, mock_validate_config):
        cli.run_cli(["gen", "readme", "--scope", "reference", "--context", "developer", "-o", "docs"])

        mock_gen.assert_awaited_once_with(
            cli._ai_config,
            "readme",
            source="content/raw/project-overview.md",
            scope="reference",
            context="developer",
            output="docs",
        )

    @patch("ccdcc.cli._validate_ai_config")
    @patch("ccdcc.ai.assistants.gen.Console")
    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_unsupported_gen_format_exits_with_error(
        self, mock_autocomplete, mock_stderr, MockConsole, mock_validate_config
    ):
        with self.assertRaises(SystemExit) as cm:
            cli.run_cli(["gen", "pdf"])

        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Error: Unsupported format: pdf", mock_stderr.getvalue())
        mock_validate_config.assert_not_called()
        MockConsole.assert_not_called()

    @patch("ccdcc.cli._create_config")
    @patch("os.path.exists", return_value=False)
    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_unsupported_gen_format_fails_before_config_is_created(
        self, mock_autocomplete, mock_stderr, mock_exists, mock_create_config
    ):
        """Verify `ccdcc gen report` without a config file neither prompts nor opens an editor."""
        self.addCleanup(setattr, cli, "_ai_config", cli._ai_config)
        cli._ai_config = {}

        with self.assertRaises(SystemExit) as cm:
            cli.run_cli(["gen", "report"])

        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Error: Unsupported format: report", mock_stderr.getvalue())
        mock_create_config.assert_not_called()

    @patch("ccdcc.cli._validate_ai_config")
    @patch("builtins.input", return_value="")
    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_missing_prompt_exits_with_error(
        self, mock_autocomplete, mock_stderr, mock_input, mock_validate_config
    ):
        with self.assertRaises(SystemExit) as cm:
            cli.run_cli(["ask"])

        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Error: No prompt provided", mock_stderr.getvalue())

    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_missing_required_argument_exits_with_error(self, mock_autocomplete, mock_stderr):
        with self.assertRaises(SystemExit):
            cli.run_cli(["gen"])

        self.assertIn("the following arguments are required: format", mock_stderr.getvalue())

    @patch("sys.stderr", new_callable=StringIO)
    @patch("argcomplete.autocomplete")
    def test_invalid_command_exits_with_error(self, mock_autocomplete, mock_stderr):
        with self.assertRaises(SystemExit):
            cli.run_cli(["fly"])

        self.assertIn("invalid choice: 'fly'", mock_stderr.getvalue())


class TestCommandRegistry(unittest.TestCase):
    def test_commands_are_registered(self):
        names = sorted(command.name for command in cli._available_commands)
        self.assertEqual(names, ["ask", "gen", "interactive", "lint"])

    def test_help_comes_from_the_docstring(self):
        ask = next(c for c in cli._available_commands if c.name == "ask")
        self.assertEqual(ask.help, "Ask the AI assistant a question.")

    def test_handler_name_is_enforced(self):
        def run(args):
            """Does things."""

        with self.assertRaises(ValueError):
            cli.command(run, [])

    def test_handler_docstring_is_enforced(self):
        def handle_nothing(args):
            pass

        with self.assertRaises(ValueError):
            cli.command(handle_nothing, [])


@patch.dict(os.environ, {"CCDCC_CONFIG": "/fake/.ccdcc/config.json"})
class TestConfigValidation(unittest.TestCase):
    """Tests for the _validate_ai_config function."""

    def setUp(self):
        """Reset the global config before each test."""
        cli._ai_config = {}
        self.addCleanup(setattr, cli, "_ai_config", {})

    @patch("os.path.exists", return_value=True)
    @patch("builtins.open", new_callable=mock_open, read_data='{"provider": "test"}')
    def test_config_exists_and_is_valid(self, mock_file, mock_exists):
        """Verify config is loaded correctly when the file exists and is valid."""
        cli._validate_ai_config()
        self.assertEqual(cli._ai_config, {"provider": "test"})
        mock_file.assert_called_once_with("/fake/.ccdcc/config.json", "r")
        # It should be idempotent and not re-read the file.
        mock_file.reset_mock()
        cli._validate_ai_config()
        mock_file.assert_not_called()

    @patch("os.path.exists", return_value=True)
    @patch("builtins.open", new_callable=mock_open, read_data="{invalid json")
    @patch("sys.stderr", new_callable=StringIO)
    def test_config_exists_but_is_invalid(self, mock_stderr, mock_file, mock_exists):
        """Verify the application exits if the config file is malformed."""
        with self.assertRaises(SystemExit) as cm:
            cli._validate_ai_config()
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Error reading or parsing", mock_stderr.getvalue())

    @patch("os.path.exists", return_value=False)
    @patch("builtins.input", return_value="n")
    @patch("sys.stdout", new_callable=StringIO)
    @patch("sys.stderr", new_callable=StringIO)
    def test_config_creation_denied_by_user(self, mock_stderr, mock_stdout, mock_input, mock_exists):
        """Verify the application exits if the user denies config creation."""
        with self.assertRaises(SystemExit) as cm:
            cli._validate_ai_config()
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Configuration file not found", mock_stdout.getvalue())
        self.assertIn("Configuration is required", mock_stderr.getvalue())

    @patch("os.path.exists", return_value=False)
    @patch("builtins.input", return_value="y")
    @patch("os.makedirs")
    @patch("builtins.open", new_callable=mock_open)
    @patch("json.dump")
    @patch("os.getenv", return_value="my-editor")
    @patch("subprocess.run")
    @patch("sys.stdout", new_callable=StringIO)
    @patch("json.load", return_value={"provider": "test"})
    def test_config_creation_flow_success(
        self, mock_json_load, mock_stdout, mock_subprocess, mock_getenv, mock_json_dump,
        mock_file, mock_makedirs, mock_input, mock_exists
    ):
        """Verify the full config creation flow when the user confirms."""
        cli._validate_ai_config()

        mock_input.assert_called_once()
        mock_makedirs.assert_called_once_with("/fake/.ccdcc", exist_ok=True)
        mock_subprocess.assert_called_once_with(
            ["my-editor", "/fake/.ccdcc/config.json"], check=True
        )

        mock_file.assert_any_call("/fake/.ccdcc/config.json", "w")
        config_template = mock_json_dump.call_args[0][0]
        self.assertEqual(config_template["provider"], "openai")
        self.assertIn("openai", config_template["provider_configs"])

        mock_json_load.assert_called_once()
        self.assertEqual(cli._ai_config, {"provider": "test"})

    @patch("os.path.exists", return_value=False)
    @patch("builtins.input", return_value="y")
    @patch("os.makedirs")
    @patch("builtins.open", new_callable=mock_open)
    @patch("os.getenv", return_value="bad-editor")
    @patch("subprocess.run", side_effect=FileNotFoundError)
    @patch("sys.stdout", new_callable=StringIO)
    @patch("sys.stderr", new_callable=StringIO)
    def test_config_creation_editor_not_found(
        self, mock_stderr, mock_stdout, mock_subprocess, mock_getenv, mock_file,
        mock_makedirs, mock_input, mock_exists
    ):
        """Verify the application exits if the specified editor is not found."""
        with self.assertRaises(SystemExit) as cm:
            cli._validate_ai_config()
        self.assertEqual(cm.exception.code, 1)
        mock_subprocess.assert_called_once()
        self.assertIn("Could not find editor", mock_stderr.getvalue())
