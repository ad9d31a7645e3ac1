from pathlib import Path

import pytest
from dotenv import load_dotenv

from helpers import mark_by_dir

load_dotenv()


TESTS = Path(__file__).parent

def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "mythx_verify" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "mythx_verify" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "mythx_verify" / "app", pytest.mark.e2e)
    mark_by_dir(items, TESTS / "mythx_verify" / "shared", pytest.mark.unit)
