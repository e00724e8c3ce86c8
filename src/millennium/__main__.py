from millennium.cli.etl_runner import main

raise SystemExit(main())
