"""
Club Match Tracker - Hauptanwendung

Zentraler Einstiegspunkt: Update-Läufe, Scheduler und API Server.
"""

import asyncio
import logging
import signal
import sys

# Windows-specific asyncio policy to avoid 'Event loop is closed' and transport warnings
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import uvicorn

from match_tracker.api.main import create_fastapi_app
from match_tracker.apps import MatchTrackerApp
from match_tracker.common.logging_utils import configure_logging
from match_tracker.core.config import Settings


class TrackerService:
    """Hauptklasse für den gesamten Match Tracker Service"""

    def __init__(self, settings: Settings = None):
        self.settings = settings or Settings()
        self.logger = logging.getLogger("match_tracker")

        self.tracker_app: MatchTrackerApp | None = None
        self.fastapi_app = None

        # Tasks
        self.background_tasks = []
        self.shutdown_event = asyncio.Event()

        self._setup_logging()

    def _setup_logging(self):
        """Konfiguriert Logging"""
        configure_logging(
            "match_tracker",
            level=self.settings.log_level,
            log_format=self.settings.log_format,
            log_dir=self.settings.log_file_path,
        )

    def _setup_signal_handlers(self):
        """Konfiguriert Signal Handlers für graceful shutdown"""
        loop = asyncio.get_running_loop()

        def signal_handler(signum, frame=None):
            self.logger.info(f"Received signal {signum}, initiating shutdown...")
            loop.call_soon_threadsafe(self.shutdown_event.set)

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, signal_handler, sig)
            except NotImplementedError:
                signal.signal(sig, signal_handler)

    async def initialize(self):
        """Initialisiert alle Komponenten"""
        try:
            self.logger.info("Initializing Match Tracker...")
            self.tracker_app = MatchTrackerApp(self.settings)
            await self.tracker_app.initialize()

            if self.settings.run_mode != "collection_once":
                self.fastapi_app = create_fastapi_app(self.settings, self.tracker_app)
                self.logger.info("FastAPI App initialized")

            self.logger.info("Match Tracker initialization completed")
        except Exception as e:
            self.logger.error(f"Failed to initialize Match Tracker: {e}")
            raise

    async def start_background_tasks(self):
        """Bootstrap-Lauf und Scheduler"""
        try:
            result = await self.tracker_app.bootstrap()
            if result is None:
                _, metadata = await self.tracker_app.current_snapshot()
                self.logger.info(
                    f"Snapshot loaded: {metadata.total_teams} teams, "
                    f"{metadata.total_matches} matches, season {metadata.season}"
                )
            elif not result.success:
                self.logger.warning(f"Initial update failed: {result.error}")
        except Exception as e:
            # The API still serves whatever state exists
            self.logger.error(f"Initial update failed: {e}")

        if self.settings.enable_scheduler:
            self.background_tasks.append(self.tracker_app.scheduler.start())
            self.logger.info("Update scheduler started")

    async def run_api_server(self):
        """Startet den API Server"""
        config = uvicorn.Config(
            self.fastapi_app,
            host=self.settings.api_host,
            port=self.settings.api_port,
            log_level=self.settings.log_level.lower(),
            access_log=True,
        )
        server = uvicorn.Server(config)
        # Signals are handled here, not by uvicorn
        server.install_signal_handlers = lambda: None

        self.logger.info(f"Starting API server on {self.settings.api_host}:{self.settings.api_port}")

        server_task = asyncio.create_task(server.serve())
        self.background_tasks.append(server_task)

        # Warte auf Shutdown
        await self.shutdown_event.wait()

        # Stoppe Server gracefully
        server.should_exit = True
        await server_task

    async def run(self) -> int:
        """Hauptausführung des Service"""
        exit_code = 0
        try:
            self._setup_signal_handlers()
            await self.initialize()

            if self.settings.run_mode == "collection_once":
                result = await self.tracker_app.run_update(trigger="once")
                self.logger.info(f"Update completed: {result.model_dump(mode='json')}")
                exit_code = 0 if result.success else 1

            elif self.settings.run_mode == "api_only":
                await self.run_api_server()

            elif self.settings.run_mode == "full_service":
                await self.start_background_tasks()
                await self.run_api_server()

            else:
                self.logger.error(f"Unknown run mode: {self.settings.run_mode}")
                exit_code = 2

        except Exception as e:
            self.logger.error(f"Service execution failed: {e}")
            raise
        finally:
            await self.shutdown()
        return exit_code

    async def shutdown(self):
        """Graceful Shutdown"""
        self.logger.info("Initiating graceful shutdown...")
        self.shutdown_event.set()

        if self.tracker_app:
            await self.tracker_app.cleanup()

        for task in self.background_tasks:
            if not task.done():
                task.cancel()
        if self.background_tasks:
            await asyncio.gather(*self.background_tasks, return_exceptions=True)
        self.background_tasks.clear()

        self.logger.info("Graceful shutdown completed")


async def main() -> int:
    """Haupteinstiegspunkt"""
    service = TrackerService(Settings())
    return await service.run()


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
    except Exception as e:
        logging.error(f"Service failed: {e}")
        sys.exit(1)
