from conversation_classifier.cli import main

raise SystemExit(main())
