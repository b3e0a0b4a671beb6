from payload_listener.cli import main

raise SystemExit(main())
