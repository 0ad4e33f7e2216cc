"""
Application startup validation and initialization.

This module performs startup checks so the service refuses to run in
production with a broken configuration or promotion table.
"""

import logging
import sys
from typing import List, Tuple

from core.config import settings
from modules.promotions.data.promotion_registry import default_registry
from modules.promotions.services.clock import utc_now

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_promotion_table(self) -> bool:
        """Check the static promotion table loads and has something to show"""
        try:
            registry = default_registry()
        except ValueError as e:
            self.errors.append(f"Promotion table is invalid: {str(e)}")
            return False

        now = utc_now()
        live = [p for p in registry if p.is_live(now)]
        if not live:
            self.warnings.append("No promotions are currently live")
        logger.info(f"Promotion table loaded: {len(registry)} total, {len(live)} live")
        return True

    def check_security_settings(self) -> bool:
        """Check settings that must not leak into production"""
        if not settings.is_production:
            return True

        passed = True
        if settings.debug:
            self.errors.append("DEBUG is enabled in production")
            passed = False
        if "*" in settings.cors_origins:
            self.warnings.append("CORS allows any origin in production")
        return passed

    def run_all_checks(self) -> Tuple[bool, List[str], List[str]]:
        """Run all startup checks"""
        logger.info("Running startup checks...")

        checks = [
            self.check_promotion_table(),
            self.check_security_settings(),
        ]

        return all(checks), self.errors, self.warnings


def run_startup_checks() -> Tuple[bool, List[str]]:
    """
    Run startup checks and log results.

    Exits the process when checks fail in production.
    """
    validator = StartupValidator()
    passed, errors, warnings = validator.run_all_checks()

    for warning in warnings:
        logger.warning(f"  {warning}")

    if errors:
        logger.error("Startup Errors:")
        for error in errors:
            logger.error(f"  {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_logging():
    """Configure root logging from settings"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
