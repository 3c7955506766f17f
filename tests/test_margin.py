from decimal import Decimal

import pytest

from domain.margin import ceiling_for, evaluate


def test_equality_is_not_exceeding():
    result = evaluate(100, 130, 30)
    assert result.ceiling == 130.0
    assert result.exceeds is False
    assert result.excess_percent is None


def test_just_above_ceiling_exceeds():
    result = evaluate(100, 130.01, 30)
    assert result.ceiling == 130.0
    assert result.exceeds is True
    assert result.excess_percent == pytest.approx(0.0076923, rel=1e-4)


def test_within_limit_scenario():
    result = evaluate(5.47, 7.00, 30)
    assert result.ceiling == pytest.approx(7.111)
    assert result.exceeds is False
    assert result.verdict_label == "Revisional improcedente"
    assert result.verdict_detail == "Dentro do limite permitido"
    assert result.claim_well_founded is False


def test_above_limit_scenario():
    result = evaluate(5.47, 8.00, 30)
    assert result.ceiling == pytest.approx(7.111)
    assert result.exceeds is True
    assert result.excess_percent == pytest.approx(12.50, abs=0.02)
    assert result.verdict_label == "Revisional procedente"
    assert result.verdict_detail == "Acima do limite de 30,00%"
    assert result.claim_well_founded is True


def test_evaluate_is_pure():
    assert evaluate(5.47, 8.00, 30) == evaluate(5.47, 8.00, 30)


def test_zero_base_and_zero_charged_has_no_excess():
    result = evaluate(0, 0, 30)
    assert result.ceiling == 0.0
    assert result.exceeds is False
    assert result.excess_percent is None
    assert result.excess_unbounded is False


def test_zero_ceiling_with_positive_charge_is_unbounded():
    result = evaluate(0, 1.5, 30)
    assert result.exceeds is True
    assert result.excess_percent is None
    assert result.excess_unbounded is True
    assert result.to_dict()["excess_unbounded"] is True


def test_custom_margin_is_injected():
    assert evaluate(10, 11, 0).exceeds is True
    assert evaluate(10, 11, 10).exceeds is False
    assert evaluate(10, 11, 10).verdict_detail == "Dentro do limite permitido"
    assert evaluate(10, 12, 12.5).verdict_detail == "Acima do limite de 12,50%"


def test_accepts_decimal_inputs():
    assert ceiling_for(Decimal("5.47"), Decimal("30")) == Decimal("7.1110")
    assert evaluate(Decimal("5.47"), Decimal("7.111"), Decimal("30")).exceeds is False
