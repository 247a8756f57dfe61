"""Tests for the command line interface."""

import json
import logging

import pytest
from click.testing import CliRunner

from imagen_form import cli
from imagen_form.config import APIKeys, Config, Defaults
from imagen_form.generators import ImageGenerationError

from conftest import FakeGenerator


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config(tmp_path, monkeypatch):
    cfg = Config(
        api_keys=APIKeys(google="test-key"),
        defaults=Defaults(output_dir=str(tmp_path / "images")),
    )
    monkeypatch.setattr(cli.Config, "load", classmethod(lambda cls, config_path=None: cfg))
    return cfg


def use_generator(monkeypatch, generator):
    monkeypatch.setattr(
        "imagen_form.controller.get_imagen_generator",
        lambda: (lambda api_key: generator),
    )


class TestGenerate:
    def test_saves_image(self, runner, config, monkeypatch, tmp_path, jpeg_image):
        generator = FakeGenerator(images=[jpeg_image])
        use_generator(monkeypatch, generator)
        output = tmp_path / "cube.jpg"

        result = runner.invoke(cli.main, ["generate", "a", "red", "cube", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == jpeg_image.image_bytes
        assert generator.calls[0][0] == "a red cube"
        assert generator.closed

    def test_default_output_dir(self, runner, config, monkeypatch, tmp_path, jpeg_image):
        use_generator(monkeypatch, FakeGenerator(images=[jpeg_image]))

        result = runner.invoke(cli.main, ["generate", "x"])

        assert result.exit_code == 0, result.output
        saved = list((tmp_path / "images").glob("imagen-*.jpg"))
        assert len(saved) == 1

    def test_service_failure(self, runner, config, monkeypatch):
        use_generator(monkeypatch, FakeGenerator(error=ImageGenerationError("quota exceeded")))

        result = runner.invoke(cli.main, ["generate", "x"])

        assert result.exit_code == 1
        assert "Failed to generate image: quota exceeded" in result.output

    def test_no_image(self, runner, config, monkeypatch):
        use_generator(monkeypatch, FakeGenerator(images=[]))

        result = runner.invoke(cli.main, ["generate", "x"])

        assert result.exit_code == 1
        assert "No image was generated" in result.output

    def test_missing_key(self, runner, config):
        config.api_keys.google = ""

        result = runner.invoke(cli.main, ["generate", "x"])

        assert result.exit_code == 1
        assert "API_KEY is not defined" in result.output

    def test_json_output(self, runner, config, monkeypatch, tmp_path, jpeg_image):
        use_generator(monkeypatch, FakeGenerator(images=[jpeg_image]))
        output = tmp_path / "out.jpg"

        result = runner.invoke(cli.main, ["generate", "x", "--json", "-o", str(output)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["error"] is None
        assert data["is_loading"] is False
        assert data["result"]["mime_type"] == "image/jpeg"
        assert "data_url" not in data["result"]
        assert data["saved_path"] == str(output)

    @pytest.mark.parametrize("args", [["   "], ["   ", "--json"]])
    def test_blank_prompt(self, runner, config, monkeypatch, tmp_path, args):
        generator = FakeGenerator()
        use_generator(monkeypatch, generator)

        result = runner.invoke(cli.main, ["generate", *args])

        assert result.exit_code == 1
        assert "Prompt is empty" in result.output
        assert "Image saved" not in result.output
        assert generator.calls == []
        assert not (tmp_path / "images").exists()

    def test_inline_preview_uses_result(self, runner, config, monkeypatch, tmp_path, jpeg_image):
        use_generator(monkeypatch, FakeGenerator(images=[jpeg_image]))
        previews = []
        monkeypatch.setattr(cli, "preview_image", lambda image, max_width=None: previews.append(image))

        result = runner.invoke(cli.main, ["generate", "x", "--inline", "-o", str(tmp_path / "out.jpg")])

        assert result.exit_code == 0, result.output
        assert len(previews) == 1
        assert previews[0].data == jpeg_image.image_bytes


class TestKeys:
    def test_check_keys_ok(self, runner, config):
        result = runner.invoke(cli.main, ["check-keys"])
        assert result.exit_code == 0
        assert "configured" in result.output

    def test_check_keys_missing(self, runner, config):
        config.api_keys.google = ""
        result = runner.invoke(cli.main, ["check-keys"])
        assert result.exit_code == 1
        assert "missing" in result.output

    def test_setup_keys_writes_file(self, runner, tmp_path, monkeypatch):
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        config_file = tmp_path / "config.yaml"
        monkeypatch.setattr("imagen_form.config.GLOBAL_CONFIG_FILE", config_file)

        result = runner.invoke(cli.main, ["setup-keys", "--google", "new-key"])

        assert result.exit_code == 0, result.output
        assert Config.load(config_file).api_keys.google == "new-key"


def test_version(runner):
    result = runner.invoke(cli.main, ["--version"])
    assert result.exit_code == 0
