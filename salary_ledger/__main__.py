from salary_ledger.cli import main

raise SystemExit(main())
