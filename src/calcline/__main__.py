from __future__ import annotations

from calcline.cli import main

raise SystemExit(main())
