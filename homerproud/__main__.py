"""Allow running Make Homer Proud as a module: python -m homerproud."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .api.client import ApiClient, ApiError
from .app import HomerProudApp
from .config import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("homerproud")

    try:
        api = ApiClient(settings.api_base_url, timeout=settings.request_timeout)
    except ApiError as exc:
        log.error("%s: %r, check api_base_url in settings", exc, settings.api_base_url)
        sys.exit(2)

    app = QApplication(sys.argv)
    app.setApplicationName("Make Homer Proud")
    app.setOrganizationName("MakeHomerProud")

    window = HomerProudApp(api, settings)
    window.show()
    window.bootstrap()
    log.info("Make Homer Proud ready, server at %s", api.base_url)

    code = app.exec()
    api.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
