"""Integration tests for the file pipeline and CLI."""

import json
import os

import cv2
import numpy as np
import pytest


class TestRunPipeline:
    """Tests that run the full pipeline against files on disk."""

    def test_outputs_written(self, temp_dir, synthetic_input_file, small_config):
        """Test that run_pipeline writes every output file."""
        from paintnumbers.pipeline import run_pipeline

        out_dir = os.path.join(temp_dir, "output")

        result = run_pipeline(synthetic_input_file, out_dir, config=small_config)

        for name in ("template.png", "preview.png", "palette.json", "regions.json",
                     "summary.json", "validation_report.json", "validation_summary.txt"):
            assert os.path.exists(os.path.join(out_dir, name)), f"Missing {name}"

        template = cv2.imread(os.path.join(out_dir, "template.png"), cv2.IMREAD_COLOR)
        assert template.shape == (48 + result.legend_height, 64, 3)

        with open(os.path.join(out_dir, "palette.json"), "r", encoding="utf-8") as f:
            palette = json.load(f)
        assert [entry["number"] for entry in palette] == list(range(1, len(result.palette) + 1))

        with open(os.path.join(out_dir, "summary.json"), "r", encoding="utf-8") as f:
            summary = json.load(f)
        assert summary["result_id"] == result.result_id
        assert summary["input"]["width"] == 64
        assert summary["input"]["image_id"].startswith("img_")

    def test_debug_artifacts(self, temp_dir, synthetic_input_file, small_config):
        """Test that debug mode writes per-stage artifacts."""
        from paintnumbers.pipeline import run_pipeline

        out_dir = os.path.join(temp_dir, "output")

        run_pipeline(synthetic_input_file, out_dir, config=small_config, debug=True)

        debug_dir = os.path.join(out_dir, "debug")
        assert os.path.exists(os.path.join(debug_dir, "stage1_palette", "01_palette.png"))
        assert os.path.exists(os.path.join(debug_dir, "stage2_classify", "01_index_map.png"))
        assert os.path.exists(os.path.join(debug_dir, "stage4_merge", "merge_metrics.json"))

    def test_config_path(self, temp_dir, synthetic_input_file):
        """Test that run_pipeline reads a YAML config file."""
        from paintnumbers.pipeline import run_pipeline

        config_path = os.path.join(temp_dir, "config.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            f.write("quantize:\n  num_colors: 3\nregions:\n  min_region_size: 10\n")

        result = run_pipeline(synthetic_input_file, os.path.join(temp_dir, "out"), config_path=config_path)

        assert len(result.palette) <= 3

    def test_missing_input(self, temp_dir):
        """Test that a missing input file is rejected before processing."""
        from paintnumbers.pipeline import run_pipeline

        with pytest.raises(ValueError):
            run_pipeline(os.path.join(temp_dir, "nope.png"), os.path.join(temp_dir, "out"))


class TestCli:
    """Tests for the command-line interface."""

    def test_run_command(self, temp_dir, synthetic_input_file, capsys):
        """Test the run command end to end."""
        from paintnumbers.cli import main

        out_dir = os.path.join(temp_dir, "cli_out")

        code = main(["run", "-i", synthetic_input_file, "-o", out_dir, "--colors", "4", "--min-region-size", "5"])

        assert code == 0
        assert os.path.exists(os.path.join(out_dir, "template.png"))
        with open(os.path.join(out_dir, "palette.json"), "r", encoding="utf-8") as f:
            assert len(json.load(f)) <= 4
        assert "Template generated successfully" in capsys.readouterr().out

    def test_run_missing_input(self, temp_dir, capsys):
        """Test that a failed run returns a non-zero exit code."""
        from paintnumbers.cli import main

        code = main(["run", "-i", os.path.join(temp_dir, "nope.png"), "-o", temp_dir])

        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_run_bad_colors(self, temp_dir, synthetic_input_file):
        """Test that an invalid palette size fails cleanly."""
        from paintnumbers.cli import main

        assert main(["run", "-i", synthetic_input_file, "-o", temp_dir, "--colors", "0"]) == 1

    def test_init_config(self, temp_dir):
        """Test that init-config writes a loadable config."""
        from paintnumbers.cli import main
        from paintnumbers.config import PipelineConfig, load_config

        path = os.path.join(temp_dir, "pbn.yaml")

        assert main(["init-config", "-o", path]) == 0
        assert load_config(path) == PipelineConfig()

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows usage."""
        from paintnumbers.cli import main

        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
