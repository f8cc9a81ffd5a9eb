from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Tuple

import typer

from .calculators import estribos, invoice as invoice_calc, portfolio, pricing, suppliers
from .errors import AmbiguousMatchError, SnapshotError
from .importers import catalog_csv
from .importers.snapshot_yaml import load_catalog, load_config, load_costs, load_invoices, load_suppliers
from .logic.catalog_match import suggest as suggest_entries
from .logic.catalog_order import group_by_category
from .logic.line_cost import index_costs
from .models import CatalogEntry, CostRecord, EngineConfig, Invoice
from .normalize.medida import descriptor_for, display_medida, format_medida
from .utils import money, price_label, round_money

app = typer.Typer(help="Remito cost, margin and VAT engine", no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _find_file(data_dir: Path, stem: str, exts=(".yaml", ".yml", ".json")) -> Optional[Path]:
    for ext in exts:
        p = data_dir / f"{stem}{ext}"
        if p.exists():
            return p
    return None


def _config(configs: str) -> EngineConfig:
    return load_config(Path(configs) / "engine.yaml")


def _catalog_and_costs(data_dir: Path) -> Tuple[List[CatalogEntry], List[CostRecord]]:
    cat_path = _find_file(data_dir, "catalog")
    if cat_path:
        catalog = load_catalog(cat_path)
    else:
        catalog = catalog_csv.parse(_find_file(data_dir, "catalog", exts=(".csv",)))
    costs_path = _find_file(data_dir, "costs")
    costs = load_costs(costs_path) if costs_path else []
    return catalog, costs


def _invoices(data_dir: Path) -> List[Invoice]:
    path = _find_file(data_dir, "invoices") or _find_file(data_dir, "remitos")
    if not path:
        raise SnapshotError(f"no invoices.yaml or remitos.yaml in {data_dir}")
    return load_invoices(path)


def _default(o: Any):
    if isinstance(o, Decimal):
        return float(round_money(o))
    raise TypeError(f"not serializable: {type(o).__name__}")


def _dump(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, default=_default, ensure_ascii=False))


def _fail(e: Exception) -> None:
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(code=2)


@app.command()
def analyze(
    invoice_id: str = typer.Argument(..., help="Remito id"),
    data: str = typer.Option("data", help="Snapshot folder (catalog, costs, invoices)"),
    configs: str = typer.Option("configs", help="Config folder"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Cost, real profit and VAT for one remito."""
    try:
        cfg = _config(configs)
        data_dir = Path(data)
        catalog, costs = _catalog_and_costs(data_dir)
        invoices = {inv.id: inv for inv in _invoices(data_dir)}
    except SnapshotError as e:
        _fail(e)
    inv = invoices.get(invoice_id)
    if inv is None:
        typer.echo(f"Unknown remito: {invoice_id}", err=True)
        raise typer.Exit(code=1)
    try:
        result = invoice_calc.analyze(inv, catalog, costs, cfg.tax_rate, strict=cfg.strict_matching)
    except AmbiguousMatchError as e:
        _fail(e)

    if as_json:
        out = result.model_dump()
        out.update(net_vat=result.net_vat, costs_configured=result.costs_configured)
        _dump(out)
        return
    sym = cfg.currency_symbol
    typer.echo(f"Remito {inv.number or inv.id} ({inv.client or '-'})")
    typer.echo(f"  Venta:          {money(result.sale_total, sym)}")
    typer.echo(f"  Costo:          {money(result.cost_total, sym)}")
    typer.echo(f"  Ganancia real:  {money(result.real_profit, sym)}")
    typer.echo(f"  IVA venta:      {money(result.vat_on_sale, sym)}")
    typer.echo(f"  IVA costo:      {money(result.vat_on_cost, sym)}")
    if not result.costs_configured:
        typer.echo("  Nota: configure los costos para ver cifras precisas.")
    elif not result.complete:
        typer.echo(f"  Nota: {len(result.unresolved)} líneas sin costo configurado.")


@app.command(name="portfolio")
def portfolio_cmd(
    client: Optional[str] = typer.Option(None, help="Only this client's remitos"),
    by_client: bool = typer.Option(False, "--by-client", help="One summary per client"),
    data: str = typer.Option("data", help="Snapshot folder (catalog, costs, invoices)"),
    configs: str = typer.Option("configs", help="Config folder"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Totals across remitos: sales, cost, profit and net VAT."""
    try:
        cfg = _config(configs)
        data_dir = Path(data)
        catalog, costs = _catalog_and_costs(data_dir)
        invoices = _invoices(data_dir)
    except SnapshotError as e:
        _fail(e)
    if client:
        invoices = [inv for inv in invoices if inv.client == client]

    try:
        if by_client:
            groups = portfolio.aggregate_by_client(invoices, catalog, costs, cfg.tax_rate, strict=cfg.strict_matching)
        else:
            groups = {client or "": portfolio.aggregate(invoices, catalog, costs, cfg.tax_rate, strict=cfg.strict_matching)}
    except AmbiguousMatchError as e:
        _fail(e)

    if as_json:
        _dump({name: s.model_dump() for name, s in groups.items()})
        return
    sym = cfg.currency_symbol
    for name, s in groups.items():
        typer.echo(f"{name or 'Todos los clientes'}: {s.invoice_count} remitos")
        typer.echo(f"  Ventas:        {money(s.total_sales, sym)}")
        typer.echo(f"  Costo:         {money(s.total_cost, sym)}")
        typer.echo(f"  Ganancia real: {money(s.total_profit, sym)}")
        typer.echo(f"  IVA crédito:   {money(s.total_vat_credit, sym)}")
        typer.echo(f"  IVA débito:    {money(s.total_vat_debit, sym)}")
        typer.echo(f"  IVA neto:      {money(s.net_vat, sym)}")
        if not s.costs_configured:
            typer.echo("  Nota: configure los costos para ver cifras precisas.")


@app.command()
def suggest(
    cost: float = typer.Argument(..., help="Production cost, tax included"),
    margin: Optional[float] = typer.Option(None, help="Margin percent (default from config)"),
    tax_rate: Optional[float] = typer.Option(None, help="Tax percent (default from config)"),
    configs: str = typer.Option("configs", help="Config folder"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Suggested sale price for a production cost."""
    try:
        cfg = _config(configs)
    except SnapshotError as e:
        _fail(e)
    result = pricing.suggest(
        cost,
        cfg.default_margin if margin is None else margin,
        cfg.tax_rate if tax_rate is None else tax_rate,
    )
    if as_json:
        _dump(result.model_dump())
        return
    sym = cfg.currency_symbol
    typer.echo(f"Costo neto:        {money(result.net_cost, sym)}")
    typer.echo(f"IVA contenido:     {money(result.contained_tax, sym)}")
    typer.echo(f"Costo con margen:  {money(result.cost_with_margin, sym)}")
    typer.echo(f"Precio sugerido:   {money(result.final_price, sym)}")


@app.command()
def estribo(
    size: str = typer.Argument(..., help="Size label in cm, e.g. 10x20"),
    shape: Optional[str] = typer.Option(None, help="Cuadrado, Rectangular or Triangular"),
    kg_per_m: float = typer.Option(..., "--kg-per-m", help="Wire weight, kg per metre"),
    price_per_kg: float = typer.Option(..., "--price-per-kg", help="Wire price per kg"),
    configs: str = typer.Option("configs", help="Config folder"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Material length and cost of one estribo from its size."""
    try:
        cfg = _config(configs)
    except SnapshotError as e:
        _fail(e)
    result = estribos.estimate(
        size,
        shape,
        kg_per_meter=kg_per_m,
        price_per_kg=price_per_kg,
        bend_allowance_cm=cfg.bend_allowance_cm,
        bends=cfg.bends,
    )
    if as_json:
        _dump(result.model_dump())
        return
    if not result.valid:
        typer.echo(f"Medida no reconocida: {size!r}")
        raise typer.Exit(code=1)
    typer.echo(f"Perímetro: {result.perimeter_cm} cm, con dobleces: {result.length_cm} cm ({result.meters} m)")
    typer.echo(f"Peso: {round_money(result.weight_kg, 3)} kg")
    typer.echo(f"Costo: {money(result.cost, cfg.currency_symbol)}")


@app.command()
def compare(
    data: str = typer.Option("data", help="Folder with suppliers.yaml"),
    configs: str = typer.Option("configs", help="Config folder"),
    margin: Optional[float] = typer.Option(None, help="Margin percent (default from config)"),
    net: bool = typer.Option(False, "--net", help="Compare prices without VAT"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Compare estribo prices across suppliers."""
    try:
        cfg = _config(configs)
        path = _find_file(Path(data), "suppliers")
        if not path:
            raise SnapshotError(f"no suppliers.yaml in {data}")
        sups, specs = load_suppliers(path)
    except SnapshotError as e:
        _fail(e)
    quote_list = suppliers.quotes(specs, sups, cfg.default_margin if margin is None else margin, cfg.tax_rate)
    result = suppliers.compare(quote_list, net=net)
    if as_json:
        _dump([c.model_dump() for c in result])
        return
    sym = cfg.currency_symbol
    for c in result:
        typer.echo(
            f"{c.medida}: mejor {c.cheapest.supplier}, más caro {c.most_expensive.supplier},"
            f" ahorro {money(c.savings, sym)} ({round_money(c.savings_percent, 1)}%)"
        )


@app.command()
def catalog(
    data: str = typer.Option("data", help="Snapshot folder (catalog, costs)"),
    configs: str = typer.Option("configs", help="Config folder"),
):
    """Catalog by category with current price, cost and suggested price."""
    try:
        cfg = _config(configs)
        entries, cost_list = _catalog_and_costs(Path(data))
    except SnapshotError as e:
        _fail(e)
    costs = index_costs(cost_list)
    for category, group in group_by_category(entries).items():
        avg, count = pricing.average_real_margin(group, costs)
        typer.echo(f"{category} (margen real promedio {round_money(avg, 1)}% sobre {count} productos)")
        for e in group:
            medida = display_medida(format_medida(e.size, e.diameter))
            rec = costs.get(e.id)
            if rec is None:
                typer.echo(f"  {e.name} {medida}: {price_label(e.price, cfg.currency_symbol)} (sin costo)")
                continue
            s = pricing.suggest_for_record(rec, cfg.tax_rate)
            typer.echo(
                f"  {e.name} {medida}: {price_label(e.price, cfg.currency_symbol)}"
                f" costo {money(rec.production_cost, cfg.currency_symbol)}"
                f" sugerido {money(s.final_price, cfg.currency_symbol)}"
            )


@app.command()
def validate(
    data: str = typer.Option("data", help="Snapshot folder (catalog, costs, invoices)"),
    configs: str = typer.Option("configs", help="Config folder"),
):
    """Report remito lines that resolve to no catalog entry or no cost record."""
    try:
        cfg = _config(configs)
        data_dir = Path(data)
        catalog, costs = _catalog_and_costs(data_dir)
        invoices = _invoices(data_dir)
    except SnapshotError as e:
        _fail(e)
    gaps = 0
    for inv in invoices:
        try:
            lines = invoice_calc.resolve_lines(inv.items, catalog, costs, strict=cfg.strict_matching)
        except AmbiguousMatchError as e:
            _fail(e)
        for item, line in zip(inv.items, lines):
            if line.resolved:
                continue
            gaps += 1
            typer.echo(f"[{inv.id}] {line.quantity}x {display_medida(line.medida)} {line.product}: {line.status}")
            if line.status == "unmatched":
                for entry, score in suggest_entries(descriptor_for(item), catalog):
                    typer.echo(f"    ¿{entry.name} {entry.size} Ø{entry.diameter or '-'}? ({entry.id}, {score})")
    if gaps:
        typer.echo(f"{gaps} líneas sin costo.")
        raise typer.Exit(code=2)
    typer.echo(f"OK: {len(invoices)} remitos, todas las líneas con costo. IVA {cfg.tax_rate}%")


if __name__ == "__main__":  # pragma: no cover
    app()
