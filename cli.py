from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


DISTRIBUTION_NAME = "github-custom-mcp-server"


def _pyproject_version(pyproject_path: Path) -> str | None:
    import tomllib

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None

    version = (data.get("project") or {}).get("version")
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def _load_project_version(pyproject_path: Path | None = None) -> str:
    """Version for ``--version``.

    A source checkout answers from the pyproject.toml beside this file; an
    installed copy has none, so the distribution metadata answers, then the
    version baked into the package.
    Avoids importing the server module (and its MCP/Starlette wiring).
    """
    if pyproject_path is None:
        pyproject_path = Path(__file__).with_name("pyproject.toml")

    version = _pyproject_version(pyproject_path)
    if version:
        return version

    from importlib import metadata

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        from github_custom_mcp.config import SERVER_VERSION

        return SERVER_VERSION


def _doctor_checks() -> list[dict[str, str]]:
    from github_custom_mcp import config

    checks: list[dict[str, str]] = []

    token_var = next((name for name in config.GITHUB_TOKEN_ENV_VARS if name in os.environ), None)
    if token_var is None:
        checks.append(
            {
                "name": "github_token",
                "level": "error",
                "message": "No token configured; set one of " + ", ".join(config.GITHUB_TOKEN_ENV_VARS),
            }
        )
    elif not os.environ[token_var].strip():
        checks.append({"name": "github_token", "level": "error", "message": f"{token_var} is empty"})
    else:
        checks.append({"name": "github_token", "level": "ok", "message": f"Token read from {token_var}"})

    if config.GITHUB_API_BASE.startswith("https://"):
        checks.append({"name": "github_api_base", "level": "ok", "message": config.GITHUB_API_BASE})
    else:
        checks.append(
            {
                "name": "github_api_base",
                "level": "warning",
                "message": f"{config.GITHUB_API_BASE} is not HTTPS; the token is sent in clear text",
            }
        )

    if config.MCP_TRANSPORT in {"stdio", "sse"}:
        checks.append({"name": "transport", "level": "ok", "message": config.MCP_TRANSPORT})
    else:
        checks.append(
            {
                "name": "transport",
                "level": "error",
                "message": f"Unsupported MCP_TRANSPORT {config.MCP_TRANSPORT!r}; use stdio or sse",
            }
        )

    return checks


def _run_doctor() -> int:
    """Run basic environment checks and print a human-readable summary."""
    checks = _doctor_checks()
    ok = sum(1 for c in checks if c["level"] == "ok")
    warning = sum(1 for c in checks if c["level"] == "warning")
    error = sum(1 for c in checks if c["level"] == "error")
    status = "error" if error else ("warning" if warning else "ok")

    print(f"Status: {status}")
    print(f"Checks: ok={ok}, warning={warning}, error={error}")
    for check in checks:
        print(f"- [{check['level']}] {check['name']}: {check['message']}")

    return 0 if status != "error" else 1


def _run_serve(transport: str, host: str, port: int) -> int:
    # Lazy import: pulls in the MCP SDK, Starlette and the tool registry.
    import main as server_main

    if transport == "stdio":
        import anyio

        anyio.run(server_main.run_stdio)
        return 0

    import uvicorn

    uvicorn.run(server_main.app, host=host, port=port, log_config=None)
    return 0


def main(argv: list[str] | None = None) -> int:
    from github_custom_mcp import config

    parser = argparse.ArgumentParser(
        prog="github-custom-mcp",
        description="GitHub MCP server helpers.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the server version and exit.",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "doctor",
        help="Check configuration (token, API base, transport) and print a summary.",
    )
    serve = subparsers.add_parser("serve", help="Run the MCP server.")
    serve.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=config.MCP_TRANSPORT if config.MCP_TRANSPORT in {"stdio", "sse"} else "stdio",
    )
    serve.add_argument("--host", default=config.MCP_HOST)
    serve.add_argument("--port", type=int, default=config.MCP_PORT)

    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # Return the exit code instead of raising so tests can call main();
        # the __main__ guard still exits with it.
        return int(getattr(exc, "code", 1) or 0)

    if args.version and not args.command:
        print(_load_project_version())
        return 0

    if args.command == "doctor":
        return _run_doctor()

    if args.command == "serve":
        return _run_serve(args.transport, args.host, args.port)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
