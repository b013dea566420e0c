# vendorsync Default Configuration
# Starter configuration as Python dict and YAML generator

from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "directories": [
        {
            "path": "vendor",
            "contents": [
                {
                    "path": "github.com/example/project",
                    "git": {
                        "url": "https://github.com/example/project",
                        "ref": "origin/main",
                    },
                    "include_paths": ["pkg/**/*"],
                    "exclude_paths": ["**/*_test.go"],
                },
                {
                    "path": "local",
                    "manual": {},
                },
            ],
        },
    ],
    "options": {
        "helm_binary": "helm",
        "image_binary": "crane",
        "github_token_env": "GITHUB_TOKEN",
        "http_timeout": 60.0,
    },
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# vendorsync Configuration
#
# Each directory is assembled from its contents in order and replaced
# atomically once every content entry has been fetched.
#
# Content kinds (exactly one per entry):
#   - git: repository at a ref (branch, tag or commit)
#   - http: file or archive download, optionally checked by sha256
#   - image: OCI image filesystem (uses crane)
#   - github_release: release assets by tag or latest
#   - helm_chart: chart pulled with helm
#   - manual: keep what is already at the path
#   - directory: copy of a local directory
#
# include_paths / exclude_paths take glob patterns (*, **, ?, [..], {a,b}).
# License files are kept whenever include_paths is set (see legal_paths).

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
