"""Unit tests for the command-line interface."""
import pytest
from click.testing import CliRunner

from ics205_chirp import cli
from ics205_chirp.converter import ChannelConverter
from ics205_chirp.errors import AIUnavailableError, ConfigurationError


ONE_CHANNEL = '[{"name": "Command", "rxFreq": "155.160", "txFreq": "155.760", "tone": "100.0"}]'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def use_converter(monkeypatch):
    """Replace the environment-built converter with the given one"""
    def _use(converter):
        monkeypatch.setattr(cli.ChannelConverter, "from_config",
                            classmethod(lambda cls, config: converter))
    return _use


class TestCli:

    def test_single_file_written_next_to_input(self, runner, tmp_path, make_pdf,
                                               fake_backend, use_converter):
        pdf_path = tmp_path / "plan.pdf"
        pdf_path.write_bytes(make_pdf(["CMD1  Command  155.160  155.760"]))
        use_converter(ChannelConverter([fake_backend(text_reply=ONE_CHANNEL)]))

        result = runner.invoke(cli.main, [str(pdf_path)])

        assert result.exit_code == 0, result.output
        csv_path = tmp_path / "plan-channels.csv"
        rows = csv_path.read_text(encoding="utf-8").split("\n")
        assert rows[1].startswith("0,Command,155.160000,+,0.600000,Tone,100.0,100.0,")
        assert "1 channel(s) saved" in result.output

    def test_explicit_output_path(self, runner, tmp_path, make_pdf,
                                  fake_backend, use_converter):
        pdf_path = tmp_path / "plan.pdf"
        pdf_path.write_bytes(make_pdf(["Simplex  146.520"]))
        output_path = tmp_path / "radio.csv"
        use_converter(ChannelConverter([fake_backend(text_reply=AIUnavailableError("down"))]))

        result = runner.invoke(cli.main, [str(pdf_path), str(output_path)])

        assert result.exit_code == 0, result.output
        assert "Tier: heuristics" in result.output
        assert output_path.read_text(encoding="utf-8").startswith("Location,Name,")

    def test_folder_continues_after_failure(self, runner, tmp_path, make_pdf,
                                            fake_backend, use_converter):
        (tmp_path / "good.pdf").write_bytes(make_pdf(["Simplex  146.520"]))
        (tmp_path / "bad.pdf").write_bytes(make_pdf(["Prepared by operations"]))
        out_dir = tmp_path / "csv"
        use_converter(ChannelConverter([fake_backend(text_reply=AIUnavailableError("down"))]))

        result = runner.invoke(cli.main, [str(tmp_path), "--output-dir", str(out_dir)])

        assert result.exit_code == 1
        assert (out_dir / "good-channels.csv").exists()
        assert not (out_dir / "bad-channels.csv").exists()
        assert "Converted 1 of 2 PDF(s)" in result.output

    def test_text_only(self, runner, tmp_path, make_pdf):
        pdf_path = tmp_path / "plan.pdf"
        pdf_path.write_bytes(make_pdf(["Tactical 146.520"]))

        result = runner.invoke(cli.main, [str(pdf_path), "--text-only"])

        assert result.exit_code == 0
        assert "146.520" in result.output
        assert "1 page(s)" in result.output

    def test_configuration_error(self, runner, tmp_path, make_pdf, monkeypatch):
        pdf_path = tmp_path / "plan.pdf"
        pdf_path.write_bytes(make_pdf(["Tactical 146.520"]))

        def unconfigured(cls, config):
            raise ConfigurationError("no keys")

        monkeypatch.setattr(cli.ChannelConverter, "from_config", classmethod(unconfigured))

        result = runner.invoke(cli.main, [str(pdf_path)])

        assert result.exit_code == 1
        assert "Error initializing converter" in result.output
