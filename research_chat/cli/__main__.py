from research_chat.cli.main import main

raise SystemExit(main())
