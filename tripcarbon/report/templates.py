# tripcarbon/report/templates.py
# -*- coding: utf-8 -*-
"""
Sample input templates users can fill in with their own data.

Headers are chosen so they resolve through the schema tables without any
assumption notes.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional, Tuple

from tripcarbon.report.export import records_to_csv_text

TRIPS_TEMPLATE: List[Dict[str, object]] = [
      {
          "Assignment_ID": "ASSIGN001", "Consignment_Note_UID": "CN001", "Vehicle_Number": "VEHICLE-001"
        , "Source": "Mumbai", "Destination": "Delhi", "Distance_KM": 1400
        , "Trip_Started_At": "2024-01-15 08:00", "Trip_Completed_At": "2024-01-17 18:30"
        , "Load_Weight_Tons": 15.5
    }
    , {
          "Assignment_ID": "ASSIGN002", "Consignment_Note_UID": "CN002", "Vehicle_Number": "VEHICLE-002"
        , "Source": "Chennai", "Destination": "Bangalore", "Distance_KM": 350
        , "Trip_Started_At": "2024-01-16 14:30", "Trip_Completed_At": "2024-01-16 22:10"
        , "Load_Weight_Tons": 8.2
    }
    , {
          "Assignment_ID": "ASSIGN003", "Consignment_Note_UID": "CN003", "Vehicle_Number": "VEHICLE-003"
        , "Source": "Kolkata", "Destination": "Hyderabad", "Distance_KM": 1200
        , "Trip_Started_At": "2024-01-17 10:15", "Trip_Completed_At": "2024-01-19 09:00"
        , "Load_Weight_Tons": 20.0
    }
]

VEHICLES_TEMPLATE: List[Dict[str, object]] = [
      {"Vehicle_Number": "VEHICLE-001", "Vehicle_Type": "Heavy Goods Vehicle", "Model": "Tata 1618", "Fuel_Type": "Diesel"}
    , {"Vehicle_Number": "VEHICLE-002", "Vehicle_Type": "Medium Goods Vehicle", "Model": "Eicher Pro 2049", "Fuel_Type": "Diesel"}
    , {"Vehicle_Number": "VEHICLE-003", "Vehicle_Type": "Heavy Goods Vehicle", "Model": "Mahindra Blazo", "Fuel_Type": "Diesel"}
]

_TEMPLATES = {
      "trips": TRIPS_TEMPLATE
    , "vehicles": VEHICLES_TEMPLATE
}


def sample_template(kind: str, *, today: Optional[date] = None) -> Tuple[str, str]:
    """
    Return (filename, csv_text) for the 'trips' or 'vehicles' template.

    The filename is stamped with the date, e.g. 'trips_template_20240115.csv'.
    """
    if kind not in _TEMPLATES:
        raise KeyError(f"Unknown template {kind!r}; expected one of {sorted(_TEMPLATES)}")

    records = _TEMPLATES[kind]
    stamp = (today or date.today()).strftime("%Y%m%d")
    text = records_to_csv_text(records, list(records[0].keys()))
    return f"{kind}_template_{stamp}.csv", text
