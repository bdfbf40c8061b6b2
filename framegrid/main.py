"""Точка входа в приложение."""
import logging
import os

from framegrid.app import FrameGridApp
from framegrid.config import AppConfig


def main() -> None:
    """Настраивает логирование, создаёт и запускает главное окно приложения."""
    level = os.environ.get("FRAMEGRID_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(asctime)s | %(levelname)s | %(message)s")
    app = FrameGridApp(AppConfig.from_env())
    app.mainloop()


if __name__ == "__main__":
    main()
