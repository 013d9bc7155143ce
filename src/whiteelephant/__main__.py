from whiteelephant.cli import main

raise SystemExit(main())
