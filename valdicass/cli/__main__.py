# valdicass/cli/__main__.py
import json
import logging
import sys

from valdicass.server.errors import ConfigurationError
from valdicass.server.main import configure_logging
from valdicass.server.settings.config import settings

logger = logging.getLogger("valdicass.cli")

USAGE = """Usage:
  python -m valdicass.cli serve [--host=H] [--port=N]
  python -m valdicass.cli check

Examples:
  python -m valdicass.cli serve
  python -m valdicass.cli serve --port=8080
  python -m valdicass.cli check
"""


def _parse_opts(args):
    opts = {}
    for arg in args:
        if arg.startswith("--host="):
            opts["host"] = arg.split("=", 1)[1]
        elif arg.startswith("--port="):
            try:
                opts["port"] = int(arg.split("=", 1)[1])
            except ValueError:
                print(f"Invalid port: {arg}", file=sys.stderr)
                sys.exit(2)
    return opts


def _check_config() -> None:
    try:
        settings.validate_startup()
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE, file=sys.stderr); sys.exit(1)

    cmd = argv[0].lower()

    if cmd == "check":
        configure_logging(settings.log_level)
        _check_config()
        print(json.dumps(settings.masked(), indent=2, default=str))
        return

    if cmd == "serve":
        import uvicorn
        from valdicass.server.main import app

        configure_logging(settings.log_level)
        _check_config()
        # app.state.settings is this same object, so startup logs the real address
        for key, value in _parse_opts(argv[1:]).items():
            setattr(settings, key, value)
        uvicorn.run(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
        return

    print(USAGE, file=sys.stderr); sys.exit(1)


if __name__ == "__main__":
    main()
