#!/usr/bin/env python3
"""Report translation keys that exist in the reference locale but not in the others."""
from __future__ import annotations

import argparse
import sys

from tarjama.core.config import settings
from tarjama.core.i18n import I18N
from tarjama.core.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reference", default="en", help="Locale every other locale is compared to")
    parser.add_argument("locales", nargs="*", help="Locales to check (default: all)")
    args = parser.parse_args(argv)

    setup_logging(log_file=False)
    I18N.load_locales(settings.LOCALES_DIR)

    targets = args.locales or [c for c in I18N.available_locales() if c != args.reference]
    total = 0
    for code in targets:
        missing = I18N.missing_keys(code, reference=args.reference)
        total += len(missing)
        print(f"[{code}] {len(missing)} missing")
        for key in missing:
            print(f"    {key}")
    return 1 if total else 0


if __name__ == "__main__":
    sys.exit(main())
