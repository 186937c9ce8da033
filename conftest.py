"""Test configuration making ``starknet_gate`` importable from a checkout."""

import os
import sys

# Put the repository root on ``sys.path`` so the tests run against the working
# tree even when the package has not been installed with ``pip install -e``.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)
