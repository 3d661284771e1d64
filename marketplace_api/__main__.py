"""Run the API with uvicorn: ``python -m marketplace_api``."""

import uvicorn

from marketplace_api.app import create_app
from marketplace_config import get_active_config


def main() -> None:
    config = get_active_config()
    app = create_app(config=config)
    uvicorn.run(app, host=config.api.host, port=config.api.port, log_config=None)


if __name__ == "__main__":
    main()
