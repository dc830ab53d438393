"""
Application startup validation and logging setup.

Checks run once when the API starts; problems are logged, and only stop
the process in production.
"""

import logging
import sys
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text

from core.config import settings
from core.database import engine
from modules.reservations.config.engine_config import get_engine_config

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "areas",
    "tables",
    "table_maintenance",
    "reservations",
    "restaurant_settings",
]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_required_tables(self) -> bool:
        """Check if required database tables exist"""
        try:
            existing_tables = sa.inspect(engine).get_table_names()
        except sa.exc.SQLAlchemyError as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
            return True

        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.warnings.append(
                f"Missing database tables: {', '.join(missing_tables)}"
            )
        return True

    def check_engine_config(self) -> bool:
        """Warn about engine settings that disable features"""
        config = get_engine_config()
        if not config.SUGGESTION_OFFSETS_MINUTES or config.MAX_SUGGESTIONS == 0:
            self.warnings.append("Alternative time suggestions are disabled")
        if 0 in config.SUGGESTION_OFFSETS_MINUTES:
            self.warnings.append("Suggestion offset 0 is ignored")
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
            ("Engine Configuration", self.check_engine_config),
        ]

        all_passed = True

        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks():
    """Run all startup validation checks"""
    logger.info("=" * 60)
    logger.info("Starting reservation engine")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"  {warning}")
    for error in errors:
        logger.error(f"  {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning(f"Starting in {settings.environment} mode despite errors")
    else:
        logger.info("All startup checks passed")


def configure_logging():
    """Configure root logging from settings"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
