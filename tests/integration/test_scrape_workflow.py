"""
Integration tests for the scrape workflow.

These tests load a configuration file, build the Flask application and
scrape it over the test client against an on-disk cgroup hierarchy,
exercising the walker, parser, collector and exposition together.
"""

import toml
import pytest
from prometheus_client.parser import text_string_to_metric_families

from psiexporter.config import load_config
from psiexporter.exporter import create_app


def _write_config(temp_dir, fs, **metrics):
    path = temp_dir / "exporter.toml"
    with open(path, "w") as f:
        toml.dump(
            {
                "exporter": {"listen_address": "127.0.0.1:9333"},
                "collection": {
                    "cgroup_root": str(fs.root),
                    "proc_pressure_dir": str(fs.root.parent / "proc_pressure"),
                    "exclude_suffixes": [".mount", ".socket", ".scope"],
                    "read_workers": 3,
                },
                "metrics": metrics,
            },
            f,
        )
    return path


def _scrape(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    samples = {}
    for family in text_string_to_metric_families(response.get_data(as_text=True)):
        for sample in family.samples:
            key = (sample.name, sample.labels["controller"], sample.labels["id"], sample.labels["kind"])
            samples[key] = sample.value
    return samples


@pytest.mark.integration
class TestScrapeWorkflow:
    """End-to-end scrapes through the HTTP endpoint."""

    def test_full_scrape(self, temp_dir, populated_cgroup_fs):
        """Test a scrape of every cgroup with default policies."""
        fs = populated_cgroup_fs
        fs.add("/system.slice/dev-hugepages.mount")
        fs.add("/user.slice/user-1000.slice/session-2.scope")
        config = load_config(_write_config(temp_dir, fs))
        client = create_app(config=config).test_client()

        samples = _scrape(client)

        ids = {key[2] for key in samples}
        assert ids == {
            "/",
            "/system.slice",
            "/system.slice/systemd-journald.service",
            "/user.slice",
            "/user.slice/user-1000.slice",
        }
        assert samples[("pressure_avg_60s_ratio", "memory", "/", "some")] == pytest.approx(0.06)
        assert samples[("pressure_total_seconds", "memory", "/user.slice", "full")] == pytest.approx(1.0)
        assert ("pressure_total_seconds", "cpu", "/", "full") not in samples
        assert samples[("pressure_total_seconds", "io", "/", "some")] == 0.0

    def test_policies_from_file(self, temp_dir, populated_cgroup_fs):
        """Test both suppression switches taken from the configuration file."""
        fs = populated_cgroup_fs
        config = load_config(_write_config(temp_dir, fs, disable_averages=True, silence_zeros=True))
        client = create_app(config=config).test_client()

        samples = _scrape(client)

        assert {key[0] for key in samples} == {"pressure_total_seconds"}
        assert {key[1] for key in samples} == {"cpu", "memory"}
        assert len(samples) == 4 * 3

    def test_tree_changes_between_scrapes(self, temp_dir, populated_cgroup_fs):
        """Test that every scrape reflects the hierarchy at that moment."""
        fs = populated_cgroup_fs
        client = create_app(config=load_config(_write_config(temp_dir, fs))).test_client()
        before = _scrape(client)

        fs.remove("/system.slice")
        fs.add("/machine.slice")
        fs.add(
            "/user.slice",
            cpu="some avg10=0.00 avg60=0.00 avg300=0.00 total=3000000\n",
        )
        after = _scrape(client)

        assert "/system.slice" in {key[2] for key in before}
        ids = {key[2] for key in after}
        assert "/system.slice" not in ids
        assert "/system.slice/systemd-journald.service" not in ids
        assert "/machine.slice" in ids
        assert after[("pressure_total_seconds", "cpu", "/user.slice", "some")] == pytest.approx(3.0)

    def test_corrupt_file_does_not_fail_scrape(self, temp_dir, populated_cgroup_fs):
        """Test that one malformed pressure file only hides its own series."""
        fs = populated_cgroup_fs
        fs.add("/user.slice", io="bogus avg10=0.00 avg60=0.00 avg300=0.00 total=0\n")
        client = create_app(config=load_config(_write_config(temp_dir, fs))).test_client()

        samples = _scrape(client)

        assert not [key for key in samples if key[1] == "io" and key[2] == "/user.slice"]
        assert ("pressure_total_seconds", "memory", "/user.slice", "some") in samples

    def test_cgroup_root_removed(self, temp_dir, populated_cgroup_fs):
        """Test that losing the cgroup mount answers 503, and recovers."""
        fs = populated_cgroup_fs
        client = create_app(config=load_config(_write_config(temp_dir, fs))).test_client()
        moved = fs.root.with_name("cgroup.moved")

        fs.root.rename(moved)
        try:
            assert client.get("/metrics").status_code == 503
        finally:
            moved.rename(fs.root)

        assert client.get("/metrics").status_code == 200
