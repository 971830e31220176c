import os
import sys
import logging

# --------------------------------------------------------
# One logger shared by every SchistoCare module
# --------------------------------------------------------
LOGGER_NAME = "schistocare"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(os.getenv("SCHISTO_LOG_LEVEL", "INFO").upper())

# Streamlit re-imports modules on rerun; only attach the handler once
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.propagate = False
