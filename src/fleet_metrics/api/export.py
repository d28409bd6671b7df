"""CSV / ZIP export of the KPI and vehicle data.

Files are spreadsheet-friendly: UTF-8 with a byte-order mark and ``;`` as
the field delimiter (the Excel default for Russian locales).
"""

from __future__ import annotations

import csv
import io
import zipfile
from datetime import datetime, timezone

from fleet_metrics.engine.kpi import compute_kpi
from fleet_metrics.engine.vehicles import compute_vehicles

EXPORT_TYPES = ("kpi", "vehicles", "all")
CSV_DELIMITER = ";"
UTF8_BOM = "\ufeff"


def csv_filename(export_type: str, month: str) -> str:
    return f"{export_type}-{month}.csv"


def zip_filename(month: str) -> str:
    return f"transport-data-{month}.zip"


def _write_kpi_rows(writer, month: str) -> None:
    kpi = compute_kpi(month)
    writer.writerow(["Показатель", "Значение", "Период"])
    writer.writerow(["Выручка", kpi.revenue, month])
    writer.writerow(["Расходы", kpi.costs, month])
    writer.writerow(["Прибыль", kpi.profit, month])
    writer.writerow(["Маржа (%)", kpi.margin_pct, month])


def _write_vehicle_rows(writer, month: str) -> None:
    writer.writerow(["Номер", "Модель", "Прибыль", "Маржа (%)", "Период"])
    for vehicle in compute_vehicles(month):
        writer.writerow([vehicle.plate, vehicle.model, vehicle.profit, vehicle.margin_pct, month])


_WRITERS = {
    "kpi": _write_kpi_rows,
    "vehicles": _write_vehicle_rows,
}


def render_csv(export_type: str, month: str) -> bytes:
    """One CSV file (``kpi`` or ``vehicles``) as UTF-8 bytes with BOM."""
    if export_type not in _WRITERS:
        raise ValueError(f"Unsupported CSV export type: {export_type!r}")

    buffer = io.StringIO()
    buffer.write(UTF8_BOM)
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    _WRITERS[export_type](writer, month)
    return buffer.getvalue().encode("utf-8")


def render_readme(month: str, generated_at: datetime | None = None) -> str:
    stamp = (generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M:%S")
    return (
        "Transport Dashboard Export\n"
        f"Period: {month}\n"
        f"Generated: {stamp}\n"
        "\n"
        "Files:\n"
        f"- {csv_filename('kpi', month)}: Key Performance Indicators\n"
        f"- {csv_filename('vehicles', month)}: Vehicle Performance Data\n"
    )


def render_zip(month: str, generated_at: datetime | None = None) -> bytes:
    """ZIP archive with both CSV files and a README."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(csv_filename("kpi", month), render_csv("kpi", month))
        archive.writestr(csv_filename("vehicles", month), render_csv("vehicles", month))
        archive.writestr("README.txt", render_readme(month, generated_at))
    return buffer.getvalue()
