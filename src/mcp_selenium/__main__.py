#region Imports
import sys
import logging

from mcp_selenium.config import load_env_file, get_env_config
from mcp_selenium.context import ServerContext
from mcp_selenium.server import create_server
from mcp_selenium.shutdown import install_signal_handlers
#endregion

#region Logger
logger = logging.getLogger(__name__)
#endregion


#region Logging
def configure_logging(level: str) -> None:
    # stdout carries the MCP stdio stream; logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
#endregion


def main() -> None:
    load_env_file()
    config = get_env_config()
    configure_logging(config["log_level"])

    ctx = ServerContext(config=config)
    mcp = create_server(ctx)
    install_signal_handlers(ctx)

    logger.info("Starting mcp_selenium server (stdio)")
    mcp.run()

    # The lifespan has already shut the context down.
    logger.info("Server stopped")
    sys.exit(0)


if __name__ == "__main__":
    main()
