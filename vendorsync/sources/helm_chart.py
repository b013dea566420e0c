# vendorsync Helm Chart Source
# Pulls a chart with the helm binary and stages its unpacked contents

from pathlib import Path
from typing import Any

import yaml

from vendorsync.config.schema import HelmChartSource, SourceKind
from vendorsync.sources.base import FetchError, SyncContext, move_into, run_tool


class HelmChartSync:
    """Syncs contents from a Helm chart repository."""

    kind = SourceKind.HELM_CHART

    def __init__(self, source: HelmChartSource, context: SyncContext):
        self.source = source
        self.context = context

    def describe(self) -> str:
        desc = f"{self.source.name}@{self.source.version or 'latest'}"
        if self.source.repository_url:
            desc = f"{desc} from {self.source.repository_url}"
        return f"helm chart {desc}"

    def pull_args(self, untar_dir: Path) -> list[str]:
        """Build the helm pull command line."""
        args = [self.context.opts.helm_binary, "pull"]

        repo_url = self.source.repository_url
        if repo_url and repo_url.startswith("oci://"):
            args.append(f"{repo_url.rstrip('/')}/{self.source.name}")
        else:
            args.append(self.source.name)
            if repo_url:
                args.extend(["--repo", repo_url])

        if self.source.version:
            args.extend(["--version", self.source.version])

        args.extend(["--untar", "--untardir", str(untar_dir)])
        return args

    def sync(self, dst_path: Path) -> dict[str, Any]:
        """
        Pull the chart and move it to dst_path.

        Raises:
            ToolError: If helm fails.
            FetchError: If the pulled chart can't be found or read.
        """
        untar_dir = self.context.incoming_path / "chart"
        untar_dir.mkdir(parents=True, exist_ok=True)

        run_tool(self.pull_args(untar_dir))

        chart_dirs = [p for p in untar_dir.iterdir() if p.is_dir()]
        if len(chart_dirs) != 1:
            raise FetchError(f"Expected one chart directory after helm pull, found {len(chart_dirs)}")
        chart_dir = chart_dirs[0]

        chart_file = chart_dir / "Chart.yaml"
        if not chart_file.is_file():
            raise FetchError(f"Pulled chart has no Chart.yaml: {chart_dir.name}")
        with open(chart_file, encoding="utf-8") as f:
            meta = yaml.safe_load(f) or {}

        move_into(chart_dir, dst_path)

        return {"version": str(meta.get("version", "")), "app_version": str(meta.get("appVersion", ""))}
