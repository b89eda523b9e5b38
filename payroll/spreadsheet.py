import io
import logging
import os
from typing import Any, Dict, List

import pandas as pd
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


EXCEL_EXTENSIONS = (".xlsx", ".xls")
CSV_EXTENSIONS = (".csv",)
ALLOWED_EXTENSIONS = EXCEL_EXTENSIONS + CSV_EXTENSIONS

# heading (normalised) -> importer field
COLUMN_ALIASES = {
    "employee": "employee",
    "employee_id": "employee",
    "employee_code": "employee",
    "emp_id": "employee",
    "email": "employee",
    "employee_email": "employee",
    "date": "date",
    "attendance_date": "date",
    "status": "status",
    "clock_in": "clock_in",
    "check_in": "clock_in",
    "time_in": "clock_in",
    "clock_out": "clock_out",
    "check_out": "clock_out",
    "time_out": "clock_out",
    "working_hours": "working_hours",
    "hours": "working_hours",
    "hours_worked": "working_hours",
    "overtime_hours": "overtime_hours",
    "overtime": "overtime_hours",
    "note": "note",
    "notes": "note",
}


def normalise_heading(name) -> str:
    return "_".join(str(name).strip().lower().replace("-", " ").split())


def _extension(upload) -> str:
    return os.path.splitext(getattr(upload, "name", "") or "")[1].lower()


def read_attendance_rows(upload) -> List[Dict[str, Any]]:
    """
    Read an uploaded .xlsx/.xls/.csv file into a list of row dicts keyed by
    importer field name. Unknown columns are dropped, empty cells become None.
    """
    ext = _extension(upload)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError({"file": f"Unsupported file type '{ext or 'unknown'}'. Use .xlsx, .xls or .csv."})

    try:
        upload.seek(0)
        buf = io.BytesIO(upload.read())
        if ext in EXCEL_EXTENSIONS:
            df = pd.read_excel(buf, dtype=object)
        else:
            df = pd.read_csv(buf, dtype=str, keep_default_na=False, skipinitialspace=True)
    except Exception as exc:
        logger.warning("Could not read attendance file %s: %s", getattr(upload, "name", "?"), exc)
        raise ValidationError({"file": f"Could not read the uploaded file: {exc}"})

    columns = {}
    for column in df.columns:
        target = COLUMN_ALIASES.get(normalise_heading(column))
        # the first column mapping to a field wins
        if target and target not in columns.values():
            columns[column] = target

    if "employee" not in columns.values() or "date" not in columns.values():
        raise ValidationError({"file": "The file must have an employee column and a date column."})

    df = df[list(columns)].rename(columns=columns)
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict("records")
