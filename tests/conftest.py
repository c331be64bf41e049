"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local proxyplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of proxyplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("proxyplane"):
        del sys.modules[module_name]

from proxyplane.factory import AccessInterceptorFactory, set_default_factory  # noqa: E402


@pytest.fixture
def factory() -> AccessInterceptorFactory:
    """A fresh factory with default configuration."""
    return AccessInterceptorFactory()


@pytest.fixture(autouse=True)
def _reset_default_factory() -> Iterator[None]:
    yield
    set_default_factory(None)
