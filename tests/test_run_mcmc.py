"""Tests for the command-line pipeline."""

import json

import run_mcmc

TINY = ["--n_walkers", "4", "--n_steps", "6", "--nk", "5", "--z_max", "4",
        "--nz", "50", "--grid_size", "10", "--seed", "3"]


class TestCLI:
    """End-to-end CLI runs on mock limits."""

    def test_outputs_written(self, tmp_path):
        assert run_mcmc.main(TINY + ["--output", str(tmp_path)]) == 0

        data = json.loads((tmp_path / "cosmic_superstring_results.json").read_text())
        assert data["meta"]["ptaName"] == "NANOGrav 15yr (Mock)"
        assert data["meta"]["settings"]["nWalkers"] == 4
        assert data["meta"]["settings"]["seed"] == 3
        assert len(data["mcmc"]["samples"]) == 4 * 3

        samples = (tmp_path / "mcmc_samples.csv").read_text().strip().split("\n")
        assert len(samples) == 1 + 12
        grid = (tmp_path / "kde_grid.csv").read_text().strip().split("\n")
        assert len(grid) == 1 + 100

    def test_plots_written(self, tmp_path):
        assert run_mcmc.main(TINY + ["--plot", "--output", str(tmp_path)]) == 0
        assert (tmp_path / "posterior.png").exists()
        assert (tmp_path / "spectrum.png").exists()

    def test_missing_pta_file(self, tmp_path):
        status = run_mcmc.main(TINY + ["--pta", str(tmp_path / "none.json"),
                                       "--output", str(tmp_path)])
        assert status == 1

    def test_malformed_pta_csv(self, tmp_path):
        path = tmp_path / "pta.csv"
        path.write_text("frequency,upper_limit,error\n1e-9\n")
        status = run_mcmc.main(TINY + ["--pta", str(path), "--output", str(tmp_path)])
        assert status == 1
        assert not (tmp_path / "cosmic_superstring_results.json").exists()

    def test_invalid_settings(self, tmp_path):
        assert run_mcmc.main(["--n_walkers", "1", "--output", str(tmp_path)]) == 1

    def test_parser_defaults(self):
        args = run_mcmc.build_parser().parse_args([])
        assert args.n_walkers == 24
        assert args.n_steps == 1200
        assert args.nk == 40
        assert args.z_max == 8.0
        assert args.bandwidth == 0.18
