"""
测试公共 fixture
"""

from pathlib import Path

import pytest

from azuki.engine import AzukiEngine, EngineConfig, Lexicon, load_lexicon

FIXTURES = Path(__file__).parent / 'fixtures'
TEST_DICT = FIXTURES / 'test-dict.utf8'


@pytest.fixture(scope='session')
def lexicon() -> Lexicon:
    return load_lexicon(TEST_DICT)


@pytest.fixture
def engine(lexicon) -> AzukiEngine:
    eng = AzukiEngine(lexicon, EngineConfig(neural_timeout_ms=0))
    yield eng
    eng.close()


@pytest.fixture
def empty_engine() -> AzukiEngine:
    return AzukiEngine(Lexicon.empty(), EngineConfig())
