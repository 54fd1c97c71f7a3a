from drink_agent.cli import main

raise SystemExit(main())
