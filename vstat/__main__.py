from vstat.cli import main

raise SystemExit(main())
