"""ExcelWriter: builds the annual tax workbook with openpyxl."""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from rsutax.report.data_collector import TaxReportData

USD_FMT = "$#,##0.00"
DKK_FMT = '#,##0.00 "kr."'
SHARES_FMT = "#,##0.000000"
RATE_FMT = "0.0000"

# (sheet_name, headers, data_attr, {0-based column: number format})
SHEET_DEFS: list[tuple[str, list[str], str, dict[int, str]]] = [
    ("summary", ["Metric", "Value"], "summary", {}),
    (
        "capital_gains",
        ["Date", "Ticker", "Shares", "Proceeds (USD)", "Cost Basis (USD)", "Gain/Loss (USD)",
         "USD/DKK", "Rate Source", "Gain/Loss (DKK)", "Method", "Term", "Lots"],
        "capital_gains",
        {2: SHARES_FMT, 3: USD_FMT, 4: USD_FMT, 5: USD_FMT, 6: RATE_FMT, 8: DKK_FMT},
    ),
    (
        "gains_by_ticker",
        ["Ticker", "Method", "Shares Sold", "Disposals", "Gain/Loss (USD)", "Gain/Loss (DKK)"],
        "gains_by_ticker",
        {2: SHARES_FMT, 4: USD_FMT, 5: DKK_FMT},
    ),
    (
        "dividends",
        ["Date", "Ticker", "Type", "Amount (USD)", "USD/DKK", "Rate Source", "Amount (DKK)"],
        "dividends",
        {3: USD_FMT, 4: RATE_FMT, 6: DKK_FMT},
    ),
    (
        "dividends_by_ticker",
        ["Ticker", "Payments", "Gross (USD)", "Gross (DKK)", "Withheld (USD)", "Withheld (DKK)"],
        "dividends_by_ticker",
        {2: USD_FMT, 3: DKK_FMT, 4: USD_FMT, 5: DKK_FMT},
    ),
    ("warnings", ["Warning"], "warnings", {}),
]

HEADER_FONT = Font(bold=True)


class ExcelWriter:
    """Writes TaxReportData to an in-memory workbook."""

    def write_to_buffer(self, data: TaxReportData) -> BytesIO:
        wb = Workbook()

        for idx, (sheet_name, headers, data_attr, num_fmts) in enumerate(SHEET_DEFS):
            if idx == 0:
                ws = wb.active
                ws.title = sheet_name
            else:
                ws = wb.create_sheet(title=sheet_name)

            for col_idx, header in enumerate(headers, start=1):
                ws.cell(row=1, column=col_idx, value=header).font = HEADER_FONT

            rows = getattr(data, data_attr, [])
            for row_idx, row in enumerate(rows, start=2):
                # Warnings are plain strings
                values = (row,) if isinstance(row, str) else row
                for col_idx, value in enumerate(values, start=1):
                    cell = ws.cell(row=row_idx, column=col_idx, value=value)
                    fmt = num_fmts.get(col_idx - 1)
                    if fmt:
                        cell.number_format = fmt

            ws.freeze_panes = "A2"
            _auto_fit_columns(ws)

        buf = BytesIO()
        wb.save(buf)
        buf.seek(0)
        return buf


def _auto_fit_columns(ws) -> None:
    for col_cells in ws.columns:
        col_letter = get_column_letter(col_cells[0].column)
        max_len = max((len(str(c.value)) for c in col_cells if c.value is not None), default=0)
        ws.column_dimensions[col_letter].width = min(max_len + 3, 50)
