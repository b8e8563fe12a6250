"""gridcalc - in-memory reactive spreadsheet core.

Usage::

    from gridcalc import create_sheet

    sheet = create_sheet(3, 3)
    sheet.set_cell_value("A1", "10")
    sheet.set_cell_value("C3", "=A1:C2")
    sheet.set_cell_value("C2", "=A1")
    print(sheet.get_cell_value("C3"))  # 20
"""

from gridcalc._cell import Cell, Formula, Literal
from gridcalc._errors import CycleDetected, InvalidCellId, OutOfBounds, ParseError, SheetError
from gridcalc._sheet import Sheet, create_sheet
from gridcalc._utils import MAX_COLUMNS, cell_id_to_coords, coords_to_cell_id

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "CycleDetected",
    "Formula",
    "InvalidCellId",
    "Literal",
    "MAX_COLUMNS",
    "OutOfBounds",
    "ParseError",
    "Sheet",
    "SheetError",
    "cell_id_to_coords",
    "coords_to_cell_id",
    "create_sheet",
]
