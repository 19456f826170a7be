"""
神经网络候选源测试
"""

from typing import List

import pytest
import torch

from azuki.engine import (
    AzukiEngine,
    EngineConfig,
    NeuralConfig,
    NeuralInferenceError,
    NeuralSourceUnavailable,
    NullCandidateSource,
    TorchCandidateSource,
    create_candidate_source,
)


class EchoModel(torch.nn.Module):
    """按上下文拼接读音的假模型"""

    def forward(self, reading: str, context: str, limit: int) -> List[str]:
        out: List[str] = [context + reading, reading, "候補"]
        return out[:limit]


class FailingModel(torch.nn.Module):

    def forward(self, reading: str, context: str, limit: int) -> List[str]:
        if reading == "だめ":
            raise RuntimeError("inference failed")
        out: List[str] = [reading]
        return out


def save_scripted(module, path):
    torch.jit.script(module).save(str(path))
    return path


@pytest.fixture(autouse=True)
def isolated_model_dirs(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)


class TestNullSource:

    def test_always_unavailable(self):
        source = NullCandidateSource()
        assert not source.is_ready
        with pytest.raises(NeuralSourceUnavailable):
            source.convert("かく")


class TestTorchSource:

    def test_disabled(self, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=False, model_path=str(path)))
        assert not source.is_usable()
        with pytest.raises(NeuralSourceUnavailable):
            source.convert("かく")

    def test_model_missing(self, tmp_path):
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(tmp_path / "none.pt")))
        assert source.get_model_path() is None
        with pytest.raises(NeuralSourceUnavailable):
            source.convert("かく")

    def test_invalid_model_file(self, tmp_path):
        path = tmp_path / "broken.pt"
        path.write_bytes(b"not a model")
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(path)))
        with pytest.raises(NeuralSourceUnavailable):
            source.initialize()

    def test_default_model_path(self, tmp_path):
        model_dir = tmp_path / "home" / ".azuki" / "models"
        model_dir.mkdir(parents=True)
        path = save_scripted(EchoModel(), model_dir / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=True))
        assert source.get_model_path() == path

    def test_explicit_path_missing_ignores_defaults(self, tmp_path):
        model_dir = tmp_path / "home" / ".azuki" / "models"
        model_dir.mkdir(parents=True)
        save_scripted(EchoModel(), model_dir / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(tmp_path / "none.pt")))
        assert source.get_model_path() is None
        assert not source.is_usable()
        with pytest.raises(NeuralSourceUnavailable):
            source.initialize()

    def test_lazy_load_and_convert(self, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(path)))
        assert not source.is_ready
        # 非 contextual 模式下上下文为空，重复候选去重
        assert source.convert("かく", "手紙を") == ["かく", "候補"]
        assert source.is_ready

    def test_contextual(self, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        config = NeuralConfig(enabled=True, model_path=str(path), contextual=True)
        source = TorchCandidateSource(config)
        assert source.convert("かく", "手紙を") == ["手紙をかく", "かく", "候補"]

    def test_inference_limit(self, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(path), inference_limit=1))
        assert source.convert("かく") == ["かく"]

    def test_inference_error(self, tmp_path):
        path = save_scripted(FailingModel(), tmp_path / "zenz.pt")
        source = TorchCandidateSource(NeuralConfig(enabled=True, model_path=str(path)))
        assert source.convert("いい") == ["いい"]
        with pytest.raises(NeuralInferenceError):
            source.convert("だめ")


class TestCreateCandidateSource:

    def test_disabled_gives_null(self):
        assert isinstance(create_candidate_source(NeuralConfig()), NullCandidateSource)

    def test_missing_model_gives_null(self, tmp_path):
        config = NeuralConfig(enabled=True, model_path=str(tmp_path / "none.pt"))
        assert isinstance(create_candidate_source(config), NullCandidateSource)

    def test_usable_model(self, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        source = create_candidate_source(NeuralConfig(enabled=True, model_path=str(path)))
        assert isinstance(source, TorchCandidateSource)

    def test_engine_integration(self, lexicon, tmp_path):
        path = save_scripted(EchoModel(), tmp_path / "zenz.pt")
        source = create_candidate_source(NeuralConfig(enabled=True, model_path=str(path)))
        eng = AzukiEngine(lexicon, EngineConfig(neural_timeout_ms=0), source)
        assert eng.convert("あずき").combined_candidates == ["あずき", "候補", "小豆"]
