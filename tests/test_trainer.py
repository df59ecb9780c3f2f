"""Tests for the gradient-descent trainer."""

import math
from pathlib import Path

import pytest
import torch

from conftest import flat, linear_rows
from linreg import trainer
from linreg.config import TrainingConfig
from linreg.dataset import load_flat_dataset
from linreg.errors import InsufficientDataError, MalformedInputError
from linreg.model import LinearModel
from linreg.trainer import fit, init_parameters, run_epoch, split_blocks


CANONICAL_DATA = Path(__file__).resolve().parents[1] / "data" / "simple_regression.csv"


def _seeded(seed: int = 0) -> torch.Generator:
    return torch.Generator().manual_seed(seed)


@pytest.mark.parametrize("rows", [61, 75, 200])
def test_split_shapes(rows):
    blocks = split_blocks(flat(linear_rows(rows)), TrainingConfig())
    assert blocks.train_rows == rows - 60
    assert blocks.holdout_rows == 60
    assert blocks.train_x.shape == (rows - 60, 1)
    assert blocks.train_y.shape == (rows - 60, 1)
    assert blocks.holdout_x.shape == (60, 1)
    assert blocks.holdout_y.shape == (60, 1)


def test_split_keeps_row_order():
    rows = linear_rows(65)
    blocks = split_blocks(flat(rows), TrainingConfig())
    assert blocks.train_x[0, 0].item() == pytest.approx(rows[0][0])
    assert blocks.train_y[4, 0].item() == pytest.approx(rows[4][1])
    assert blocks.holdout_x[0, 0].item() == pytest.approx(rows[5][0])
    assert blocks.holdout_y[-1, 0].item() == pytest.approx(rows[-1][1])


@pytest.mark.parametrize("data", [[], [1.0], flat(linear_rows(100)) + [1.0]])
def test_malformed_input_fails_before_training(monkeypatch, data):
    def _no_epochs(*args, **kwargs):
        raise AssertionError("epoch ran on malformed input")

    monkeypatch.setattr(trainer, "run_epoch", _no_epochs)
    with pytest.raises(MalformedInputError):
        fit(data, generator=_seeded())


@pytest.mark.parametrize("rows", [1, 59, 60])
def test_insufficient_data(rows):
    with pytest.raises(InsufficientDataError):
        fit(flat(linear_rows(rows)), generator=_seeded())


def test_init_parameters():
    model = init_parameters(TrainingConfig(), generator=_seeded(3))
    assert model.intercept == 1.0
    assert model.weights.shape == (1, 1)
    assert model.weights.dtype == torch.float32
    assert 0.0 <= model.weight < math.sqrt(2.0)


def test_init_parameters_scales_the_uniform_draw():
    config = TrainingConfig(feature_count=2)
    draw = torch.rand(2, 1, generator=_seeded(5), dtype=torch.float32)
    model = init_parameters(config, generator=_seeded(5))
    assert torch.allclose(model.weights, draw * math.sqrt(1.0))

    draw = torch.rand(1, 1, generator=_seeded(5), dtype=torch.float32)
    model = init_parameters(TrainingConfig(), generator=_seeded(5))
    assert torch.allclose(model.weights, draw * math.sqrt(2.0))


def test_init_parameters_accepts_injected_weights():
    model = init_parameters(TrainingConfig(), initial_weights=torch.tensor([0.25]))
    assert model.weights.tolist() == [[0.25]]
    assert model.intercept == 1.0


def test_same_seed_is_deterministic():
    data = flat(linear_rows(200))
    first = fit(data, generator=_seeded(11)).model
    second = fit(data, generator=_seeded(11)).model
    assert torch.equal(first.weights, second.weights)
    assert torch.equal(first.bias, second.bias)


def test_injected_weights_are_deterministic():
    data = flat(linear_rows(200))
    first = fit(data, initial_weights=torch.tensor([0.5])).model
    second = fit(data, initial_weights=torch.tensor([0.5])).model
    assert torch.equal(first.weights, second.weights)
    assert torch.equal(first.bias, second.bias)


def test_run_epoch_uses_unnormalized_gradients():
    model = LinearModel(weights=torch.zeros(1, 1), bias=torch.zeros(1, 1))
    x = torch.tensor([[1.0], [2.0]])
    y = torch.tensor([[3.0], [5.0]])
    # error = [-3, -5]; X^T . error = -13; sum(error) = -8
    run_epoch(model, x, y, learning_rate=0.001)
    assert model.weight == pytest.approx(0.013, rel=1e-5)
    assert model.intercept == pytest.approx(0.008, rel=1e-5)


def test_step_size_grows_with_training_rows():
    x = torch.tensor([[1.0], [2.0]])
    y = torch.tensor([[3.0], [5.0]])
    single = LinearModel(weights=torch.zeros(1, 1), bias=torch.zeros(1, 1))
    doubled = single.clone()

    run_epoch(single, x, y, learning_rate=0.001)
    run_epoch(doubled, torch.cat([x, x]), torch.cat([y, y]), learning_rate=0.001)

    assert doubled.weight == pytest.approx(2 * single.weight, rel=1e-5)
    assert doubled.intercept == pytest.approx(2 * single.intercept, rel=1e-5)


def test_run_epoch_stays_float32():
    model = LinearModel(weights=torch.zeros(1, 1), bias=torch.ones(1, 1))
    run_epoch(model, torch.tensor([[1.0]]), torch.tensor([[2.0]]), learning_rate=0.0001)
    assert model.weights.dtype == torch.float32
    assert model.bias.dtype == torch.float32


def test_training_reduces_squared_error():
    noise = torch.randn(200, generator=_seeded(1)) * 1e-3
    rows = [(x, y + float(n)) for (x, y), n in zip(linear_rows(200), noise)]
    result = fit(flat(rows), generator=_seeded(2))

    x, y = result.blocks.train_x, result.blocks.train_y
    before = result.initial_model.sum_squared_error(x, y)
    after = result.model.sum_squared_error(x, y)
    assert result.model.is_finite()
    assert after < before


def test_holdout_rows_do_not_affect_training():
    rows = linear_rows(100)
    changed = rows[:40] + [(x, -y) for x, y in rows[40:]]
    first = fit(flat(rows), initial_weights=torch.tensor([1.0])).model
    second = fit(flat(changed), initial_weights=torch.tensor([1.0])).model
    assert torch.equal(first.weights, second.weights)
    assert torch.equal(first.bias, second.bias)


def test_runs_exactly_the_configured_epochs(monkeypatch):
    calls = []
    real_run_epoch = trainer.run_epoch

    def _counting(*args, **kwargs):
        calls.append(1)
        real_run_epoch(*args, **kwargs)

    monkeypatch.setattr(trainer, "run_epoch", _counting)
    result = fit(flat(linear_rows(80)), TrainingConfig(epochs=7), generator=_seeded())
    assert len(calls) == 7
    assert result.epochs == 7


def test_divergence_is_returned_not_raised():
    config = TrainingConfig(learning_rate=10.0)
    result = fit(flat(linear_rows(200)), config, generator=_seeded())
    assert not result.model.is_finite()


def test_log_every_prints_progress(capsys):
    fit(flat(linear_rows(80)), TrainingConfig(log_every=50), generator=_seeded())
    out = capsys.readouterr().out
    assert "Epoch 50/100" in out
    assert "Epoch 100/100" in out
    assert out.count("sse=") == 2


def test_silent_by_default(capsys):
    fit(flat(linear_rows(80)), generator=_seeded())
    assert capsys.readouterr().out == ""


@pytest.mark.skipif(not CANONICAL_DATA.exists(), reason="canonical dataset not available")
def test_canonical_dataset_reproduces_reference_line():
    result = fit(load_flat_dataset(CANONICAL_DATA), generator=_seeded())
    assert result.model.weight == pytest.approx(43.436935, abs=1e-3)
    assert result.model.intercept == pytest.approx(-1.2420014, abs=1e-3)
