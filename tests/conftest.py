import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from promotion_advisor.models import PromotionConfig


@pytest.fixture
def minimal_config() -> PromotionConfig:
    """Config with no transforms or stop rules, so nothing is suppressed."""
    return PromotionConfig(source="./uat", destination="./prod")
