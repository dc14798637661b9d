"""
Package logger for lambda_setup.

The level comes from the LAMBDA_SETUP_LOG_LEVEL environment variable (default INFO).
"""
import logging
import os

logger = logging.getLogger('lambda_setup')
logger.setLevel(os.getenv('LAMBDA_SETUP_LOG_LEVEL', 'INFO').upper())

# Prevent duplicate handlers during tests or reruns
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('[%(levelname)s] %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
