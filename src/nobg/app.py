# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

"""Application entry point: wire the dispatcher, bridge and window together."""

import logging
import multiprocessing

from . import config
from .bridge import Bridge
from .dispatcher import JobDispatcher

logger = logging.getLogger(__name__)


def main() -> None:
    multiprocessing.freeze_support()
    settings = config.get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Imported late so the worker process never loads Tk
    from .gui import App, DND_AVAILABLE, TkDialogs

    dialogs = TkDialogs()
    bridge  = Bridge(dialogs, JobDispatcher(settings=settings))
    app     = App(bridge)
    dialogs.parent = app

    logger.info("nobg started (model=%s, drag-and-drop=%s)", settings.model_name, DND_AVAILABLE)
    app.mainloop()


if __name__ == "__main__":
    main()
