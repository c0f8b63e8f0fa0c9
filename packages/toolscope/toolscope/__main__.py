"""Entry point: python -m toolscope."""

import logging

import uvicorn

from toolscope.runtime.context import IntrospectionRuntime
from toolscope.server import create_app
from toolscope.settings import SettingsManager

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    manager = SettingsManager()
    settings = manager.load()
    if not manager.settings_path.exists():
        manager.save(settings)
        logger.info("Wrote default settings to %s", manager.settings_path)
    runtime = IntrospectionRuntime.from_settings(settings)
    runtime.initialize()
    app = create_app(runtime=runtime)
    try:
        uvicorn.run(app, host=settings.host, port=settings.port)
    finally:
        runtime.close()


if __name__ == "__main__":
    main()
