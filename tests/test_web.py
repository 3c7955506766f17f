import json

from tests.conftest import connection_error, sgs_row


def _series_form(**overrides):
    form = {
        "codigo": "20714",
        "descricao": "",
        "data_inicial": "2024-03-01",
        "data_final": "2024-03-31",
        "taxa_analise": "800",
    }
    form.update(overrides)
    return form


def test_index_renders_both_tabs(client):
    resp = client.get("/")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Calcular com a Série" in html
    assert "Calcular com a Taxa" in html


def test_rate_form_above_limit(client):
    resp = client.post("/juros", data={"taxa_base": "547", "taxa_analise": "800"})
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "Revisional procedente" in html
    assert "Acima do limite de 30,00%" in html
    assert "+12,50%" in html
    assert "7,11%" in html


def test_rate_form_within_limit(client):
    html = client.post("/juros", data={"taxa_base": "547", "taxa_analise": "700"}).get_data(as_text=True)
    assert "Revisional improcedente" in html
    assert "Dentro do limite permitido" in html


def test_rate_form_validation_blocks_evaluation(client):
    resp = client.post("/juros", data={"taxa_base": "", "taxa_analise": "700"})
    html = resp.get_data(as_text=True)
    assert resp.status_code == 400
    assert "Taxa base deve ser maior que 0,01%" in html
    assert "Revisional" not in html


def test_clear_discards_result(client):
    client.post("/juros", data={"taxa_base": "547", "taxa_analise": "700"})

    resp = client.post("/limpar", data={"form": "juros"})
    assert resp.status_code == 302

    html = client.get("/?tab=juros").get_data(as_text=True)
    assert "Revisional" not in html


def test_series_form_uses_sgs_rate(client, sgs_session):
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])

    html = client.post("/serie", data=_series_form()).get_data(as_text=True)

    assert "Taxa BACEN" in html
    assert "Revisional procedente" in html
    assert "Taxa média de juros das operações de crédito - Total" in html
    assert sgs_session.calls[0]["params"]["dataInicial"] == "01/03/2024"


def test_series_form_with_month(client, sgs_session):
    sgs_session.queue([sgs_row("01/02/2024", "5.47")])

    html = client.post("/serie", data=_series_form(data_inicial="", data_final="", mes="02/2024", taxa_analise="700")).get_data(as_text=True)

    assert "Revisional improcedente" in html
    assert sgs_session.calls[0]["params"]["dataFinal"] == "29/02/2024"


def test_series_not_found_is_flashed(client, sgs_session):
    sgs_session.queue([])

    resp = client.post("/serie", data=_series_form())
    html = resp.get_data(as_text=True)

    assert resp.status_code == 200
    assert "Taxa não encontrada" in html
    assert "Revisional" not in html


def test_series_ambiguous_is_flashed(client, sgs_session):
    sgs_session.queue([sgs_row("01/03/2024", "5.47"), sgs_row("01/04/2024", "5.50")])

    html = client.post("/serie", data=_series_form()).get_data(as_text=True)

    assert "Mais de uma taxa encontrada" in html


def test_series_transport_error_is_flashed(client, sgs_session):
    sgs_session.fail(connection_error())

    html = client.post("/serie", data=_series_form()).get_data(as_text=True)

    assert "Erro ao calcular a taxa" in html


def test_failed_lookup_drops_previous_result(client, sgs_session):
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])
    client.post("/serie", data=_series_form())
    sgs_session.queue([])

    html = client.post("/serie", data=_series_form()).get_data(as_text=True)

    assert "Revisional" not in html


def test_series_form_validation(client, sgs_session):
    resp = client.post("/serie", data=_series_form(codigo="", mes="2024/03"))
    html = resp.get_data(as_text=True)
    assert resp.status_code == 400
    assert "Código é obrigatório" in html
    assert "Mês deve estar no formato MM/AAAA" in html
    assert sgs_session.calls == []


def test_saved_margin_is_used(client, prefs_path):
    resp = client.post("/margem", data={"margem": "20", "tab": "juros"})
    assert resp.status_code == 302
    assert json.loads(prefs_path.read_text(encoding="utf-8")) == {"margin_percent": "20"}

    html = client.post("/juros", data={"taxa_base": "547", "taxa_analise": "700"}).get_data(as_text=True)

    assert "Acima do limite de 20,00%" in html
    assert "Limite (20,00%)" in html


def test_invalid_margin_is_flashed(client, prefs_path):
    resp = client.post("/margem", data={"margem": "-5"}, follow_redirects=True)
    assert "Margem não pode ser negativa" in resp.get_data(as_text=True)
    assert not prefs_path.exists()


def test_clear_during_lookup_discards_late_result(app, client, sgs_session):
    client.get("/")
    same_browser = app.test_client()
    same_browser.set_cookie("session", client.get_cookie("session").value)
    sgs_session.before_reply = lambda: same_browser.post("/limpar", data={"form": "serie"})
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])

    late = client.post("/serie", data=_series_form()).get_data(as_text=True)
    html = client.get("/?tab=serie").get_data(as_text=True)

    assert "Revisional" not in late
    assert "Revisional" not in html

    sgs_session.before_reply = None
    sgs_session.queue([sgs_row("01/03/2024", "5.47")])
    client.post("/serie", data=_series_form())
    assert "Revisional procedente" in client.get("/?tab=serie").get_data(as_text=True)


def test_long_keystroke_input_does_not_break_forms(client):
    resp = client.post("/juros", data={"taxa_base": "9" * 5000, "taxa_analise": "9" * 400})
    assert resp.status_code == 200
    assert "Revisional improcedente" in resp.get_data(as_text=True)


def test_large_margin_field_round_trips(client, prefs_path):
    client.post("/margem", data={"margem": "1.234,50"})
    assert json.loads(prefs_path.read_text(encoding="utf-8")) == {"margin_percent": "1234.5"}
    assert 'value="1.234,50"' in client.get("/").get_data(as_text=True)
