"""PDF页数统计（用于核对导出结果的分页）。"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True, nargs="+")
    args = ap.parse_args()

    _add_backend_to_path()
    from bizdesk.export import count_pdf_pages  # type: ignore

    for name in args.pdf:
        n = count_pdf_pages(Path(name).read_bytes())
        print(f"{name}: {n}" if len(args.pdf) > 1 else n)


if __name__ == "__main__":
    main()
