from datetime import date

import pytest

from application import comparison_service
from application.comparison_service import RateComparisonService
from core.errors import LookupAmbiguousError, LookupNotFoundError, LookupTransportError
from domain.models import Series
from integration.bcb_adapter import BCBSeriesAdapter
from integration.series_catalog import SeriesCatalog
from tests.conftest import sgs_row


@pytest.fixture()
def service(sgs_session):
    catalog = SeriesCatalog([Series(20714, "Taxa média de juros das operações de crédito - Total")])
    return RateComparisonService(sgs=BCBSeriesAdapter(session=sgs_session, base_url="https://sgs.test"), catalog=catalog)


def test_compare_with_base_rate(service):
    result = service.compare_with_base_rate(100, 130, 30)
    assert result.exceeds is False


def test_single_observation_is_evaluated(service, sgs_session):
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])

    comparison = service.compare_with_series(20714, date(2024, 3, 1), date(2024, 3, 31), 8.00, 30)

    assert comparison.series.description == "Taxa média de juros das operações de crédito - Total"
    assert comparison.observation.value == 5.47
    assert comparison.result.exceeds is True
    assert comparison.result.excess_percent == pytest.approx(12.50, abs=0.02)


def test_description_from_form_wins(service, sgs_session):
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])

    comparison = service.compare_with_series_month(99999, 2024, 3, 7.00, 30, description="Minha série")

    assert comparison.series == Series(99999, "Minha série")
    assert comparison.result.exceeds is False


def test_zero_observations_never_evaluates(service, sgs_session, monkeypatch):
    def boom(*args, **kwargs):
        raise AssertionError("evaluate must not run")

    monkeypatch.setattr(comparison_service, "evaluate", boom)
    sgs_session.queue([])

    with pytest.raises(LookupNotFoundError) as exc:
        service.compare_with_series(20714, date(2024, 3, 1), date(2024, 3, 31), 8.00, 30)

    assert exc.value.message == "Taxa não encontrada"


def test_multiple_observations_are_ambiguous(service, sgs_session, monkeypatch):
    monkeypatch.setattr(comparison_service, "evaluate", lambda *a: pytest.fail("evaluate must not run"))
    sgs_session.queue([sgs_row("01/03/2024", "5.47"), sgs_row("01/04/2024", "5.60")])

    with pytest.raises(LookupAmbiguousError) as exc:
        service.compare_with_series(20714, date(2024, 3, 1), date(2024, 4, 30), 8.00, 30)

    assert exc.value.message == "Mais de uma taxa encontrada"
    assert exc.value.count == 2


def test_transport_errors_propagate(service, sgs_session):
    sgs_session.queue({"message": "Serviço indisponível"}, status_code=500)

    with pytest.raises(LookupTransportError):
        service.compare_with_series_month(20714, 2024, 3, 8.00, 30)
