"""Utility that writes a sample layered profile configuration for mfprofiles."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mfprofiles.config import CONFIG_FILE, load_config, save_config  # noqa: E402

DEFAULT_HOME = Path.home() / ".mfprofiles"
DEFAULT_GATEWAY_HOST = "gateway.example.com"
DEFAULT_GATEWAY_PORT = 7554

GLOBAL_LAYER = """\
[profiles.base]
type = "base"
secure = ["tokenValue"]

[profiles.base.properties]
host = "{gateway_host}"
port = {gateway_port}
rejectUnauthorized = true
tokenType = "apimlAuthenticationToken"

[profiles.lpar1.properties]
host = "lpar1.example.com"

[profiles.lpar1.profiles.zosmf]
type = "zosmf"
secure = ["user", "password"]

[profiles.lpar1.profiles.zosmf.properties]
port = 443
basePath = "/ibmzosmf/api/v1"

[profiles.lpar1.profiles.ssh]
type = "ssh"

[profiles.lpar1.profiles.ssh.properties]
port = 22

[defaults]
base = "base"
zosmf = "lpar1.zosmf"
ssh = "lpar1.ssh"
"""

PROJECT_LAYER = """\
[profiles.lpar1.profiles.zosmf.properties]
encoding = "IBM-1047"
responseTimeout = 600
"""


def write_layer(path: Path, content: str, *, force: bool) -> None:
    if path.exists() and not force:
        print(f"{path} already exists; leaving as-is (use --force to overwrite).")
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    print(f"Wrote {path}.")


def update_config(home: Path, project: Path | None, config_name: str) -> None:
    config = load_config().model_copy(update={"home_dir": home, "config_name": config_name})
    config = config.with_project_dir(project)
    save_config(config)
    print(f"Updated {CONFIG_FILE}.")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--home", type=Path, default=DEFAULT_HOME, help="Directory for the global layer")
    parser.add_argument("--project", type=Path, default=None, help="Directory for the project layer")
    parser.add_argument("--config-name", default="mfprofiles", help="Base name of the layer files")
    parser.add_argument("--gateway-host", default=DEFAULT_GATEWAY_HOST, help="Host of the API gateway")
    parser.add_argument("--gateway-port", type=int, default=DEFAULT_GATEWAY_PORT, help="Port of the API gateway")
    parser.add_argument("--force", action="store_true", help="Overwrite existing layer files")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    file_name = f"{args.config_name}.config.toml"
    write_layer(
        args.home / file_name,
        GLOBAL_LAYER.format(gateway_host=args.gateway_host, gateway_port=args.gateway_port),
        force=args.force,
    )
    if args.project is not None:
        write_layer(args.project / file_name, PROJECT_LAYER, force=args.force)
    update_config(args.home, args.project, args.config_name)
    print("Sample profiles are ready: base, lpar1.zosmf and lpar1.ssh.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
