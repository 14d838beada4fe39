from cmakeshell.cli import main

raise SystemExit(main())
