from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from remito_engine.cli import app

runner = CliRunner()

CATALOG = """\
products:
  - {id: e-12-6, name: Estribo, size: 12x12, diameter: '6', price: 350, category: Estribos}
  - {id: clavo-2, name: Clavo, size: 2 pulgadas, price: 1200, category: Clavos}
"""

COSTS = """\
- {product_id: e-12-6, production_cost: 121, profit_margin: 90}
- {product_id: clavo-2, production_cost: 605, profit_margin: 50}
"""

INVOICES = """\
- id: r-1
  client: Obra Norte
  total: 8300
  items:
    - {quantity: 10, medida: 12x12-Ø6mm, product: Estribo, unit_price: 350, line_total: 3500}
    - {quantity: 4, medida: 2 pulgadas, product: Clavo, unit_price: 1200, line_total: 4800}
- id: r-2
  client: Corralón Sur
  total: 2500
  items:
    - {quantity: 5, medida: 12x12-Ø8mm, product: Estribo, unit_price: 500, line_total: 2500}
"""

SUPPLIERS = """\
suppliers:
  - {id: a, name: Acindar, price_per_kg: 1500}
  - {id: s, name: Sipar, price_per_kg: 1400}
estribos:
  - {id: s1, medida: 10x20, weights: {a: '0.3', s: '0.35'}}
"""


@pytest.fixture
def dirs(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "catalog.yaml").write_text(CATALOG, encoding="utf-8")
    (data / "costs.yaml").write_text(COSTS, encoding="utf-8")
    (data / "invoices.yaml").write_text(INVOICES, encoding="utf-8")
    (data / "suppliers.yaml").write_text(SUPPLIERS, encoding="utf-8")
    configs = tmp_path / "configs"
    configs.mkdir()
    (configs / "engine.yaml").write_text("tax_rate: 21\ndefault_margin: 90\n", encoding="utf-8")
    return ["--data", str(data), "--configs", str(configs)]


def test_analyze_json(dirs) -> None:
    result = runner.invoke(app, ["analyze", "r-1", "--json", *dirs])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["cost_total"] == 3630.0
    assert out["real_profit"] == 4670.0
    assert out["vat_on_cost"] == 630.0
    assert out["costs_configured"] is True


def test_analyze_text_shows_cost_note(dirs) -> None:
    result = runner.invoke(app, ["analyze", "r-2", *dirs])
    assert result.exit_code == 0, result.output
    assert "Ganancia real:  $2.500,00" in result.output
    assert "configure los costos" in result.output


def test_analyze_unknown_invoice(dirs) -> None:
    result = runner.invoke(app, ["analyze", "r-404", *dirs])
    assert result.exit_code == 1


def test_portfolio_by_client_json(dirs) -> None:
    result = runner.invoke(app, ["portfolio", "--by-client", "--json", *dirs])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["Obra Norte"]["total_cost"] == 3630.0
    assert out["Corralón Sur"]["total_profit"] == 2500.0


def test_portfolio_for_one_client(dirs) -> None:
    result = runner.invoke(app, ["portfolio", "--client", "Obra Norte", "--json", *dirs])
    out = json.loads(result.output)
    assert out["Obra Norte"]["invoice_count"] == 1
    assert out["Obra Norte"]["total_sales"] == 8300.0


def test_suggest_uses_config_defaults(dirs) -> None:
    result = runner.invoke(app, ["suggest", "100", "--json", "--configs", dirs[3]])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out["net_cost"] == 82.64
    assert out["cost_with_margin"] == 157.02
    assert out["final_price"] == 190.0


def test_estribo(dirs) -> None:
    result = runner.invoke(app, ["estribo", "10x20", "--kg-per-m", "0.395", "--price-per-kg", "1500", "--configs", dirs[3]])
    assert result.exit_code == 0, result.output
    assert "$426,60" in result.output


def test_estribo_unrecognized_size(dirs) -> None:
    result = runner.invoke(app, ["estribo", "abc", "--kg-per-m", "0.395", "--price-per-kg", "1500", "--configs", dirs[3]])
    assert result.exit_code == 1


def test_compare(dirs) -> None:
    result = runner.invoke(app, ["compare", "--json", *dirs])
    assert result.exit_code == 0, result.output
    (row,) = json.loads(result.output)
    assert row["cheapest"]["supplier"] == "Acindar"
    assert row["most_expensive"]["supplier"] == "Sipar"


def test_validate_reports_gaps_with_suggestions(dirs) -> None:
    result = runner.invoke(app, ["validate", *dirs])
    assert result.exit_code == 2
    assert "[r-2] 5x 12x12 Ø8mm Estribo: unmatched" in result.output
    assert "e-12-6" in result.output


def test_missing_invoices_file_exits_2(tmp_path) -> None:
    result = runner.invoke(app, ["portfolio", "--data", str(tmp_path), "--configs", str(tmp_path)])
    assert result.exit_code == 2
    assert "no invoices.yaml" in result.output


def test_catalog_listing(dirs) -> None:
    result = runner.invoke(app, ["catalog", *dirs])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("Estribos")
    assert "Estribo 12x12 Ø6mm: $350 costo $121,00 sugerido $229,90" in result.output
    assert any(line.startswith("Clavos") for line in lines)


def test_validate_strict_matching_reports_duplicates(dirs, tmp_path) -> None:
    (tmp_path / "data" / "catalog.yaml").write_text(
        CATALOG + "  - {id: clavo-2b, name: Clavo, size: 2 pulgadas, price: 1100, category: Clavos}\n",
        encoding="utf-8",
    )
    (tmp_path / "configs" / "engine.yaml").write_text("strict_matching: true\n", encoding="utf-8")
    result = runner.invoke(app, ["validate", *dirs])
    assert result.exit_code == 2
    assert "clavo-2, clavo-2b" in result.output
