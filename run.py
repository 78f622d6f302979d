#!/usr/bin/env python
"""
LED Animator - Quick Launch Script

Usage:
    python run.py
"""

import sys
import logging
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger("led_animator")

    try:
        from led_animator.main import main
    except ImportError as e:
        logger.error("missing necessary dependencies: %s", e)
        logger.error("please run: pip install -e .")
        sys.exit(1)

    logger.info("Starting LED Animator")
    main()
