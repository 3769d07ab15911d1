#!/usr/bin/env python3
# scripts/write_templates.py
# -*- coding: utf-8 -*-
"""
Write the sample trips/vehicles CSV templates.

    python scripts/write_templates.py --out-dir templates
"""

from __future__ import annotations

# --- path bootstrap (must be the first lines of the file) ---
from pathlib import Path
import sys
ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------------------------

import argparse
import logging
from typing import List, Optional

from tripcarbon.infra.logging import init_logging
from tripcarbon.report.templates import sample_template

log = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Write sample trips and vehicles CSV templates.")
    p.add_argument("--out-dir", type=Path, default=Path("."), help="Target directory. Default: cwd")
    p.add_argument(
          "--kind"
        , choices=["trips", "vehicles", "both"]
        , default="both"
    )
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args(argv)

    init_logging(level=args.log_level, force=True)

    kinds = ["trips", "vehicles"] if args.kind == "both" else [args.kind]
    args.out_dir.mkdir(parents=True, exist_ok=True)
    for kind in kinds:
        filename, text = sample_template(kind)
        path = args.out_dir / filename
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        log.info("Template written → %s", path)

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
