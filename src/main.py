"""Main application entry point for EduTube Planner."""

import asyncio
import logging
import sys
from typing import Optional

from lesson_planner import LessonPlanner
from services.export_service import ExportService
from terminal_ui import TerminalUI
from utils.config import setup_logging, load_config

logger = logging.getLogger(__name__)


class EduTubeApp:
    """Main application class for EduTube Planner."""

    def __init__(self):
        self.planner: Optional[LessonPlanner] = None
        self.ui: Optional[TerminalUI] = None

    async def start(self) -> None:
        """Start the planner and run the screens until the user quits."""
        config = load_config()
        setup_logging(config['log_level'], config['log_file'])
        logger.info("Starting EduTube Planner...")

        try:
            self.planner = LessonPlanner(config)
        except ValueError as e:
            logger.error(f"Failed to start application: {e}")
            sys.exit(1)

        export_service = ExportService(
            destination_url=config.get('export_destination_url', 'https://docs.new')
        )
        self.ui = TerminalUI(self.planner, export_service)

        await self.ui.run()
        logger.info("EduTube Planner closed")


def main():
    """Main entry point."""
    app = EduTubeApp()

    try:
        asyncio.run(app.start())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
