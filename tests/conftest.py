"""
Root conftest.py - Global configuration for all test layers.

Test Layers (Top-Down TDD):
    - component/  : Component tests (mocked repositories, event bus, sharing authority)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)


def pytest_configure(config):
    """Register markers shared by every layer"""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "component: marks tests as component tests")
    config.addinivalue_line("markers", "golden: safety net tests - DO NOT MODIFY")
