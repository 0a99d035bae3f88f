import openpyxl
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from pathlib import Path
from decimal import Decimal
from typing import Optional
from datetime import date
from models.salary import SalaryBreakup
from utils.formatters import format_offer_date
from config.settings import OUTPUT_DIR

MONEY_FORMAT = '#,##0.00'


class SalaryBreakupGenerator:
    """Generate the salary breakdown annexure of an offer letter as Excel"""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR / "annexures"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate(self, breakup: SalaryBreakup, ctc, candidate_name: str,
                 designation: str, offer_id: Optional[str] = None,
                 offer_date: Optional[date] = None) -> str:
        """Generate annexure Excel file"""

        ctc = Decimal(str(ctc))

        # Create workbook
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Annexure-1"

        # Set column widths
        ws.column_dimensions['A'].width = 32
        ws.column_dimensions['B'].width = 18
        ws.column_dimensions['C'].width = 18

        # Define styles
        header_font = Font(bold=True, size=14)
        bold_font = Font(bold=True)
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        header_fill = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")

        # Title
        row = 1
        ws.merge_cells(f'A{row}:C{row}')
        ws[f'A{row}'] = "Annexure - 1: Salary Breakdown"
        ws[f'A{row}'].font = header_font
        ws[f'A{row}'].alignment = Alignment(horizontal='center')

        row = 2
        ws[f'A{row}'] = "Name"
        ws[f'B{row}'] = candidate_name
        row = 3
        ws[f'A{row}'] = "Designation"
        ws[f'B{row}'] = designation
        row = 4
        ws[f'A{row}'] = "Date"
        ws[f'B{row}'] = format_offer_date(offer_date or date.today())

        # Table header
        row = 6
        for col, title in zip('ABC', ("Component", "Monthly (INR)", "Annual (INR)")):
            cell = ws[f'{col}{row}']
            cell.value = title
            cell.font = bold_font
            cell.fill = header_fill
            cell.border = thin_border
            cell.alignment = Alignment(horizontal='center')

        deductions = breakup.deductions
        rows = [
            ("EARNINGS", None, None, True),
            ("Basic Salary", breakup.basic.monthly, breakup.basic.annual, False),
            ("House Rent Allowance", breakup.hra.monthly, breakup.hra.annual, False),
            ("Conveyance Allowance", breakup.conveyance.monthly, breakup.conveyance.annual, False),
            ("Medical Allowance", breakup.medical.monthly, breakup.medical.annual, False),
            ("Flexi Pay", breakup.flexi.monthly, breakup.flexi.annual, False),
            ("Gross Salary (A)", breakup.gross.monthly, breakup.gross.annual, True),
            ("Employer PF", breakup.employer_pf.monthly, breakup.employer_pf.annual, False),
            ("Total CTC", ctc / 12, ctc, True),
            ("DEDUCTIONS", None, None, True),
            ("Employee PF", deductions.employee_pf.monthly, deductions.employee_pf.annual, False),
            ("Professional Tax", deductions.pt.monthly, deductions.pt.annual, False),
            ("Insurance", deductions.insurance.monthly, deductions.insurance.annual, False),
            ("Income Tax (TDS)", deductions.tds.monthly, deductions.tds.annual, False),
            ("Total Deductions", deductions.total.monthly, deductions.total.annual, True),
            ("NET TAKE HOME", breakup.net_take_home.monthly, breakup.net_take_home.monthly * 12, True),
        ]

        row = 7
        for label, monthly, annual, emphasised in rows:
            ws[f'A{row}'] = label
            if monthly is not None:
                ws[f'B{row}'] = float(round(monthly, 2))
                ws[f'C{row}'] = float(round(annual, 2))
                ws[f'B{row}'].number_format = MONEY_FORMAT
                ws[f'C{row}'].number_format = MONEY_FORMAT
            for col in 'ABC':
                ws[f'{col}{row}'].border = thin_border
                if emphasised:
                    ws[f'{col}{row}'].font = bold_font
            row += 1

        # Generate filename
        slug = offer_id or candidate_name.strip().lower().replace(' ', '_')
        filename = f"{slug}_salary_annexure.xlsx"
        filepath = self.output_dir / filename

        # Save workbook
        wb.save(filepath)

        return str(filepath)
