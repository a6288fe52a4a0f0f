"""
Shared pytest setup: project root on sys.path, quiet logging.

Property of Uncompromising Sensors LLC.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from apsync.logging import configureLogging

configureLogging(console=False, file=False, level='DEBUG')
