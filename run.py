import subprocess
import logging

from allersafe.core.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def run():
    logger.info("🚀 Starting AllerSafe API...")

    backend = subprocess.Popen(
        ["uvicorn", "allersafe.main:app", "--reload", "--port", "8000"]
    )

    logger.info("✅ API running at http://localhost:8000 (docs at /docs)")
    logger.info("Press Ctrl+C to stop.")

    try:
        backend.wait()
    except KeyboardInterrupt:
        logger.info("🛑 Stopping API...")
        backend.terminate()
        logger.info("Done.")


if __name__ == "__main__":
    run()
