"""
Logging setup and run tracking for the token-sale harness
"""
import logging
import sys
from datetime import datetime
from typing import Dict, Any, Optional


def setup_logging(verbose: bool = False, log_file: Optional[str] = 'harness.log'):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


class HarnessLogger:
    """
    Logger with run tracking for a harness session
    """

    def __init__(self, name: str = "sale_harness.session", config: Optional[Dict[str, Any]] = None):
        """
        Initialize the harness logger

        Args:
            name: Logger name
            config: Optional configuration dictionary, echoed at run start
        """
        self.logger = logging.getLogger(name)

        self.config = config or {}
        self.start_time = None

    def log_run_start(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Log the start of a harness run

        Args:
            config: Run configuration
        """
        self.start_time = datetime.now()
        self.logger.info("="*80)
        self.logger.info("HARNESS RUN START")
        self.logger.info(f"Time: {self.start_time.isoformat()}")
        self.logger.info(f"Config: {config if config is not None else self.config}")
        self.logger.info("="*80)

    def log_run_end(self, summary: Dict[str, Any]) -> None:
        """
        Log the end of a harness run

        Args:
            summary: Summary of the run
        """
        end_time = datetime.now()
        duration = end_time - self.start_time if self.start_time else None

        self.logger.info("HARNESS RUN END")
        self.logger.info(f"Duration: {duration}")
        self.logger.info(f"Results: {summary}")
        self.logger.info("="*80)

    def log_milestone(self, message: str) -> None:
        """
        Log a pipeline step

        Args:
            message: Step description
        """
        self.logger.info(f"step: {message}")
